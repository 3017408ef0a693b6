"""High-level pipeline orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from ..adapters.base import BalanceRecord
from ..fetch import BalanceOutcome, CachePolicy
from ..processors import (
    ExchangeRateAverager,
    ValuationAggregator,
    ValuationResult,
    WalletExchangeValue,
)
from ..state import AppState
from .context import PipelineContext


def balance_outcome_as_dict(outcome: BalanceOutcome) -> dict[str, Any]:
    if isinstance(outcome, BalanceRecord):
        return {"address": outcome.address, "balance": outcome.balance}
    return {"error": str(outcome)}


async def refresh_prices(ctx: PipelineContext) -> None:
    """Fetch quotes into the context, recording (not raising) a failure."""
    log = ctx.state.logger
    try:
        ctx.prices = await ctx.price_fetcher_required.fetch_prices(ctx.policy)
    except Exception as e:
        log.error("Price refresh failed: %s", e)
        ctx.price_error = e
        return
    log.info("Prices refreshed for %d symbol(s)", len(ctx.prices.prices))


async def refresh_balances(ctx: PipelineContext) -> None:
    """Fetch every tracked balance into the context."""
    log = ctx.state.logger
    ctx.balances = await ctx.balance_fetcher_required.fetch_all(ctx.policy)
    ok = sum(isinstance(o, BalanceRecord) for o in ctx.balances.values())
    log.info("Balances refreshed: %d/%d ok", ok, len(ctx.balances))


async def run_refresh(state: AppState) -> dict[str, Any]:
    """Scheduled refresh: write-after-fetch for prices and all balances.

    Overlapping refreshes are not serialized; concurrent writes to the same
    key resolve as last write wins.
    """
    log = state.logger
    log.info("Starting cache refresh")
    ctx = PipelineContext(state=state, policy=CachePolicy.WRITE_AFTER_FETCH)

    await asyncio.gather(refresh_prices(ctx), refresh_balances(ctx))

    summary = {
        "prices": "ok" if ctx.price_error is None else str(ctx.price_error),
        "balances": {
            symbol: "ok" if isinstance(outcome, BalanceRecord) else str(outcome)
            for symbol, outcome in ctx.balances.items()
        },
    }
    log.info("Cache refresh completed")
    return summary


async def run_valuation(
    state: AppState, policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH
) -> ValuationResult:
    """Portfolio valuation. Never raises; failures are encoded in the result."""
    ctx = PipelineContext(state=state, policy=policy)
    aggregator = ValuationAggregator(
        ctx.balance_fetcher_required, ctx.price_fetcher_required
    )
    return await aggregator.value_portfolio(policy)


async def run_balances(
    state: AppState, policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH
) -> dict[str, dict[str, Any]]:
    ctx = PipelineContext(state=state, policy=policy)
    await refresh_balances(ctx)
    return {
        symbol: balance_outcome_as_dict(outcome)
        for symbol, outcome in ctx.balances.items()
    }


async def run_prices(
    state: AppState, policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH
) -> dict[str, Any]:
    ctx = PipelineContext(state=state, policy=policy)
    await refresh_prices(ctx)
    if ctx.price_error is not None:
        return {"error": str(ctx.price_error)}
    return dict(ctx.prices_required.prices)


async def run_exchange_value(
    state: AppState, wallets: Mapping[str, str] | None = None
) -> dict[str, WalletExchangeValue]:
    """Single-currency path over ``wallets`` (default: every tracked wallet)."""
    averager = ExchangeRateAverager(state.settings)
    return await averager.value_wallets(wallets or state.settings.wallets)
