"""Single-currency valuation from averaged exchange rates."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..adapters.price_adapters import (
    BaseRateAdapter,
    ExchangeRateSample,
    get_rate_adapter_class,
)
from ..fetch import build_balance_chain
from ..logger import get_logger
from ..settings import WalletSettings

logger = get_logger(__name__)

BalanceLookup = Callable[[str, str], Awaitable[float]]


@dataclass
class WalletExchangeValue:
    wallet: str
    balance: float
    exchanges: list[ExchangeRateSample] = field(default_factory=list)
    calculated_value: float = 0.0
    error: str | None = None

    @classmethod
    def degraded(cls, wallet: str, error: str) -> WalletExchangeValue:
        return cls(wallet=wallet, balance=0.0, exchanges=[], calculated_value=0.0, error=error)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "wallet": self.wallet,
            "balance": self.balance,
            "exchanges": [sample.as_dict() for sample in self.exchanges],
            "calculatedValue": self.calculated_value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def average_rate(samples: list[ExchangeRateSample]) -> float | None:
    """Unweighted mean of the valid samples, or None if there are none."""
    valid = [s.rate for s in samples if s.rate is not None and s.is_valid()]
    if not valid:
        return None
    return sum(valid) / len(valid)


class ExchangeRateAverager:
    """Fan-out/gather over exchanges for one currency at a time.

    The wallet balance is resolved first, then every exchange is queried
    concurrently; failed, non-numeric and non-positive rates are dropped
    before averaging. Valuing a wallet never
    raises: any failure yields a zeroed result carrying the error.
    """

    def __init__(
        self,
        config: WalletSettings,
        rate_adapters: list[BaseRateAdapter] | None = None,
        balance_lookup: BalanceLookup | None = None,
    ):
        self.config = config
        self.unsupported_exchanges: list[str] = []
        if rate_adapters is None:
            rate_adapters = []
            for name in config.exchanges:
                try:
                    rate_adapters.append(get_rate_adapter_class(name)(config))
                except ValueError as e:
                    logger.warning("%s; its rate will be dropped", e)
                    self.unsupported_exchanges.append(name)
        self.rate_adapters = rate_adapters
        self._balance_lookup = balance_lookup or self._live_balance

    async def _live_balance(self, currency: str, wallet: str) -> float:
        record = await build_balance_chain(currency, self.config).run(wallet)
        return record.balance

    async def _sample(
        self, adapter: BaseRateAdapter, currency: str
    ) -> ExchangeRateSample:
        try:
            rate = await adapter.fetch(currency)
        except Exception as e:
            logger.warning(
                "Failed to get rate from %s for %s: %s", adapter.adapter_name, currency, e
            )
            rate = None
        return ExchangeRateSample(exchange_name=adapter.adapter_name, rate=rate)

    async def gather_rates(self, currency: str) -> list[ExchangeRateSample]:
        """Query every exchange concurrently; one sample per exchange.

        Configured exchanges without an adapter yield an empty sample.
        """
        samples = list(
            await asyncio.gather(
                *(self._sample(adapter, currency) for adapter in self.rate_adapters)
            )
        )
        samples.extend(
            ExchangeRateSample(exchange_name=name, rate=None)
            for name in self.unsupported_exchanges
        )
        return samples

    async def value_wallet(self, currency: str, wallet: str) -> WalletExchangeValue:
        currency = currency.upper()
        try:
            balance = await self._balance_lookup(currency, wallet)
            samples = await self.gather_rates(currency)
            valid = [s for s in samples if s.is_valid()]
            average = average_rate(valid)
            if average is None:
                raise ValueError(f"No exchange rates found for {currency}")
        except Exception as e:
            logger.error("Failed to process %s wallet %s: %s", currency, wallet, e)
            return WalletExchangeValue.degraded(wallet, str(e))

        logger.debug(
            "%s: %d valid rate(s), average %.6f", currency, len(valid), average
        )
        return WalletExchangeValue(
            wallet=wallet,
            balance=balance,
            exchanges=valid,
            calculated_value=balance * average,
        )

    async def value_wallets(
        self, wallets: Mapping[str, str]
    ) -> dict[str, WalletExchangeValue]:
        """Value each ``currency -> wallet`` pair concurrently."""
        currencies = list(wallets)
        results = await asyncio.gather(
            *(self.value_wallet(c, wallets[c]) for c in currencies)
        )
        return dict(zip(currencies, results))
