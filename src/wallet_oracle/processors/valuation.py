from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..adapters.base import BalanceRecord
from ..adapters.price_adapters import PriceQuote
from ..constants import AssetConfig
from ..fetch import BalanceFetcher, BalanceOutcome, CachePolicy, PriceFetcher
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass
class ValuationEntry:
    """Per-asset valuation. ``value`` is always ``balance * price``."""

    address: str
    balance: float
    price: float
    error: str | None = None

    @property
    def value(self) -> float:
        return self.balance * self.price

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "address": self.address,
            "balance": self.balance,
            "price": self.price,
            "value": self.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class ValuationResult:
    """Either per-asset entries with a total, or a single top-level error."""

    entries: dict[str, ValuationEntry] = field(default_factory=dict)
    total_value: float | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> ValuationResult:
        return cls(entries={}, total_value=None, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {
            "results": {symbol: e.as_dict() for symbol, e in self.entries.items()},
            "totalValue": self.total_value,
        }


def missing_price_error(symbol: str) -> str:
    return f"No USD price available for {symbol}"


def aggregate_valuation(
    assets: Iterable[AssetConfig],
    balances: Mapping[str, BalanceOutcome],
    prices: PriceQuote,
) -> ValuationResult:
    """Join balances and quotes into a valuation.

    Args:
        assets: Tracked wallets, in output order
        balances: symbol -> BalanceRecord, or the exception that ended its fetch
        prices: USD quotes; absent symbols are valued at 0

    Returns:
        A result whose entries each carry ``balance * price``. An asset with no
        balance or no price contributes 0 and carries the originating error.
    """
    entries: dict[str, ValuationEntry] = {}
    for asset in assets:
        errors: list[str] = []

        outcome = balances.get(asset.symbol)
        if isinstance(outcome, BalanceRecord):
            address, balance = outcome.address, outcome.balance
        else:
            address, balance = asset.address, 0.0
            errors.append(str(outcome) if outcome is not None else "Balance not fetched")

        price = prices.price_for(asset.symbol)
        if price is None:
            price = 0.0
            errors.append(missing_price_error(asset.symbol))

        entries[asset.symbol] = ValuationEntry(
            address=address,
            balance=balance,
            price=price,
            error="; ".join(errors) if errors else None,
        )

    total = sum(entry.value for entry in entries.values())
    return ValuationResult(entries=entries, total_value=total)


class ValuationAggregator:
    """Runs the balance and price fetchers concurrently and joins them.

    Per-asset failures degrade that asset to zero. A failure that prevents
    valuing anything (the quote request, or the orchestration itself) yields
    ``ValuationResult.failure`` with no total.
    """

    def __init__(self, balance_fetcher: BalanceFetcher, price_fetcher: PriceFetcher):
        self.balance_fetcher = balance_fetcher
        self.price_fetcher = price_fetcher

    async def value_portfolio(
        self, policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH
    ) -> ValuationResult:
        assets = self.balance_fetcher.config.asset_configs
        try:
            balances, prices = await asyncio.gather(
                self.balance_fetcher.fetch_all(policy, assets),
                self.price_fetcher.fetch_prices(policy),
                return_exceptions=True,
            )
            if isinstance(prices, BaseException):
                raise prices
            if isinstance(balances, BaseException):
                raise balances
            result = aggregate_valuation(assets, balances, prices)
        except Exception as e:
            logger.error("Portfolio valuation failed: %s", e)
            return ValuationResult.failure(f"Failed to value portfolio: {e}")

        degraded = [s for s, entry in result.entries.items() if entry.error]
        if degraded:
            logger.warning("Valued with degraded assets: %s", ", ".join(degraded))
        logger.info("Portfolio total value: $%.2f", result.total_value or 0.0)
        return result
