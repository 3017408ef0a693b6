from __future__ import annotations

import json
import math
from abc import abstractmethod
from dataclasses import dataclass, field

from ..base import BaseAdapter


@dataclass
class PriceQuote:
    """USD prices keyed by symbol. Symbols the provider omitted are absent."""

    prices: dict[str, float] = field(default_factory=dict)

    def price_for(self, symbol: str) -> float | None:
        return self.prices.get(symbol.upper())

    def to_json(self) -> str:
        return json.dumps(self.prices)

    @classmethod
    def from_json(cls, raw: str) -> PriceQuote:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a symbol -> price mapping, got {type(data).__name__}")
        return cls(prices={str(k).upper(): float(v) for k, v in data.items()})


@dataclass
class ExchangeRateSample:
    """One exchange's USD rate for a currency; ``rate`` is None when unusable."""

    exchange_name: str
    rate: float | None

    def is_valid(self) -> bool:
        return self.rate is not None and math.isfinite(self.rate) and self.rate > 0

    def as_dict(self) -> dict[str, object]:
        return {"exchangeName": self.exchange_name, "exchangeRate": self.rate}


class BasePriceAdapter(BaseAdapter[list[str], PriceQuote]):
    """Adapter returning USD quotes for several symbols in one request."""

    async def fetch(self, request: list[str]) -> PriceQuote:
        return await self.fetch_quotes(request)

    @abstractmethod
    async def fetch_quotes(self, symbols: list[str]) -> PriceQuote:
        """Fetch USD prices for ``symbols``."""
        ...


class BaseRateAdapter(BaseAdapter[str, float | None]):
    """Adapter returning a single exchange's USD rate for one currency.

    Returns None when the exchange answered but the rate is not a number.
    """

    async def fetch(self, request: str) -> float | None:
        return await self.fetch_rate(request)

    @abstractmethod
    async def fetch_rate(self, currency: str) -> float | None:
        """Fetch the USD rate for ``currency``."""
        ...

    @staticmethod
    def _to_float(value: object) -> float | None:
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
