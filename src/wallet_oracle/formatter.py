"""Rich console tables for valuation results."""

from __future__ import annotations

from collections.abc import Mapping

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .processors import ValuationResult, WalletExchangeValue


def _truncate_address(address: str) -> str:
    """Truncate address for display."""
    if len(address) <= 18:
        return address
    return f"{address[:10]}...{address[-4:]}"


def _usd(value: float | None) -> str:
    return "[dim]<N/A>[/]" if value is None else f"${value:,.2f}"


def format_valuation_table(result: ValuationResult, console: Console | None = None) -> None:
    """Print the portfolio valuation as a table with a total panel.

    A failed valuation prints only the error panel.
    """
    console = console or Console()

    if not result.ok:
        console.print(Panel(str(result.error), title="[bold]Valuation failed[/]", border_style="red"))
        return

    table = Table(expand=True)
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Address", style="dim")
    table.add_column("Balance", justify="right")
    table.add_column("Price (USD)", justify="right", style="yellow")
    table.add_column("Value (USD)", justify="right", style="green")
    table.add_column("Error", style="red")

    for symbol, entry in result.entries.items():
        table.add_row(
            symbol,
            _truncate_address(entry.address),
            f"{entry.balance:.8f}",
            _usd(entry.price),
            _usd(entry.value),
            entry.error or "",
        )

    console.print(table)
    console.print(
        Panel(_usd(result.total_value), title="[bold]Total Value[/]", border_style="green")
    )


def format_exchange_table(
    results: Mapping[str, WalletExchangeValue], console: Console | None = None
) -> None:
    """Print per-currency exchange-averaged values."""
    console = console or Console()

    table = Table(expand=True)
    table.add_column("Currency", style="cyan", no_wrap=True)
    table.add_column("Wallet", style="dim")
    table.add_column("Balance", justify="right")
    table.add_column("Rates", justify="right", style="yellow")
    table.add_column("Value (USD)", justify="right", style="green")
    table.add_column("Error", style="red")

    for currency, value in results.items():
        rates = ", ".join(
            f"{sample.exchange_name}={sample.rate:,.2f}" for sample in value.exchanges
        )
        table.add_row(
            currency,
            _truncate_address(value.wallet),
            f"{value.balance:.8f}",
            rates or "[dim]<N/A>[/]",
            _usd(value.calculated_value),
            value.error or "",
        )

    console.print(table)
