from __future__ import annotations

import io

from rich.console import Console

from wallet_oracle.adapters.price_adapters import ExchangeRateSample
from wallet_oracle.formatter import format_exchange_table, format_valuation_table
from wallet_oracle.processors import (
    ValuationEntry,
    ValuationResult,
    WalletExchangeValue,
)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def test_valuation_table_lists_assets_and_total():
    console = _console()
    result = ValuationResult(
        entries={
            "BTC": ValuationEntry(address="bc1-wallet", balance=2.0, price=30000.0),
            "ETH": ValuationEntry(
                address="0x2bf916f8169Ed2a77324d3E168284FC252aE4087",
                balance=1.0,
                price=0.0,
                error="No USD price available for ETH",
            ),
        },
        total_value=60000.0,
    )

    format_valuation_table(result, console)

    text = console.file.getvalue()
    assert "BTC" in text
    assert "$60,000.00" in text
    assert "No USD price available for ETH" in text
    assert "0x2bf916f8...4087" in text


def test_failed_valuation_prints_error_only():
    console = _console()

    format_valuation_table(ValuationResult.failure("Failed to value portfolio: down"), console)

    text = console.file.getvalue()
    assert "Failed to value portfolio: down" in text
    assert "Total Value" not in text


def test_exchange_table_shows_rates():
    console = _console()
    results = {
        "BTC": WalletExchangeValue(
            wallet="bc1-wallet",
            balance=1.0,
            exchanges=[ExchangeRateSample("binance", 10.0), ExchangeRateSample("coinbase", 20.0)],
            calculated_value=15.0,
        ),
        "ETH": WalletExchangeValue.degraded("0xeth", "No exchange rates found for ETH"),
    }

    format_exchange_table(results, console)

    text = console.file.getvalue()
    assert "binance=10.00, coinbase=20.00" in text
    assert "No exchange rates found for ETH" in text


def test_unknown_total_renders_placeholder():
    console = _console()

    format_valuation_table(ValuationResult(entries={}, total_value=None), console)

    assert "<N/A>" in console.file.getvalue()
