"""CLI entrypoint for wallet-oracle."""

from __future__ import annotations

import asyncio
import hmac
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .cache import connect_cache
from .fetch import CachePolicy
from .formatter import format_exchange_table, format_valuation_table
from .logger import setup_logging
from .settings import WalletSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="USD valuation of tracked crypto wallets with provider fallback and caching.",
)

CachedOption = Annotated[
    bool,
    typer.Option(
        "--cached/--live",
        help="Serve cached values when present (read-preferred) instead of fetching first.",
    ),
]

TableOption = Annotated[
    bool,
    typer.Option("--table", help="Render a rich table instead of JSON."),
]


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("wallet_oracle")


def _policy(cached: bool) -> CachePolicy:
    return CachePolicy.READ_PREFERRED if cached else CachePolicy.WRITE_AFTER_FETCH


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        raise typer.BadParameter("application state was not initialized")
    return state


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [wallet_oracle] table).",
        ),
    ] = None,
    redis_url: Annotated[
        str | None,
        typer.Option("--redis-url", help="Redis URL for the shared cache."),
    ] = None,
    request_timeout: Annotated[
        float | None,
        typer.Option("--request-timeout", help="Per-provider request timeout (s)."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Load settings, configure logging and open the shared cache."""
    if config_path:
        os.environ["WALLET_ORACLE_CONFIG"] = str(config_path)

    init_kwargs: dict[str, str | float] = {}
    if redis_url is not None:
        init_kwargs["redis_url"] = redis_url
    if request_timeout is not None:
        init_kwargs["request_timeout"] = request_timeout
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = WalletSettings(**init_kwargs)
    setup_logging(settings.log_level)

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2, default=str))
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    cache = connect_cache(settings.redis_url, settings.cache_connect_retries)
    ctx.call_on_close(cache.close)
    ctx.obj = AppState(settings=settings, logger=_build_logger(), cache=cache)


@app.command()
def valuation(
    ctx: typer.Context, cached: CachedOption = False, table: TableOption = False
) -> None:
    """Portfolio valuation: per-asset balances, prices and the total."""
    from .pipeline.run import run_valuation

    result = asyncio.run(run_valuation(_state(ctx), _policy(cached)))
    if table:
        format_valuation_table(result)
    else:
        _echo_json(result.as_dict())
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def total(ctx: typer.Context, cached: CachedOption = False) -> None:
    """Only the portfolio total value."""
    from .pipeline.run import run_valuation

    result = asyncio.run(run_valuation(_state(ctx), _policy(cached)))
    if not result.ok:
        _echo_json(result.as_dict())
        raise typer.Exit(code=1)
    _echo_json(result.total_value)


@app.command()
def balances(ctx: typer.Context, cached: CachedOption = False) -> None:
    """Balances of every tracked wallet."""
    from .pipeline.run import run_balances

    _echo_json(asyncio.run(run_balances(_state(ctx), _policy(cached))))


@app.command()
def prices(ctx: typer.Context, cached: CachedOption = False) -> None:
    """USD quotes for every tracked symbol."""
    from .pipeline.run import run_prices

    data = asyncio.run(run_prices(_state(ctx), _policy(cached)))
    _echo_json(data)
    if "error" in data:
        raise typer.Exit(code=1)


@app.command()
def refresh(
    ctx: typer.Context,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            envvar="WALLET_ORACLE_REFRESH_TOKEN",
            help="Must match refresh_secret when one is configured.",
        ),
    ] = None,
) -> None:
    """Scheduled job: fetch everything live and warm the cache."""
    state = _state(ctx)
    secret = state.settings.secret("refresh_secret")
    if secret and not hmac.compare_digest(secret, token or ""):
        raise typer.BadParameter(
            "refresh token does not match refresh_secret",
            param_hint=["--token", "WALLET_ORACLE_REFRESH_TOKEN"],
        )

    from .pipeline.run import run_refresh

    _echo_json(asyncio.run(run_refresh(state)))


@app.command("exchange-value")
def exchange_value(
    ctx: typer.Context,
    symbols: Annotated[
        list[str] | None,
        typer.Argument(help="Currencies to value (default: every tracked wallet)."),
    ] = None,
    table: TableOption = False,
) -> None:
    """Value wallets using the average of several exchanges' USD rates."""
    state = _state(ctx)
    wallets = state.settings.wallets
    if symbols:
        requested = [s.upper() for s in symbols]
        unknown = [s for s in requested if s not in wallets]
        if unknown:
            raise typer.BadParameter(f"No wallet configured for: {', '.join(unknown)}")
        wallets = {s: wallets[s] for s in requested}

    from .pipeline.run import run_exchange_value

    results = asyncio.run(run_exchange_value(state, wallets))
    if table:
        format_exchange_table(results)
        return
    _echo_json({currency: value.as_dict() for currency, value in results.items()})


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
