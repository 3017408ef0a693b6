"""Single-symbol USD rates from individual exchanges."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ...constants import BINANCE_API_URL, COINBASE_API_URL
from .base import BaseRateAdapter


class _BinanceTicker(BaseModel):
    price: Any = None


class _CoinbaseRates(BaseModel):
    rates: dict[str, Any]


class _CoinbaseResponse(BaseModel):
    data: _CoinbaseRates


class BinanceRateAdapter(BaseRateAdapter):
    """``/ticker/price`` for ``<CURRENCY>USDT``."""

    @property
    def adapter_name(self) -> str:
        return "binance"

    async def fetch_rate(self, currency: str) -> float | None:
        data = await self._request_json(
            "GET",
            f"{BINANCE_API_URL}/ticker/price",
            params={"symbol": f"{currency.upper()}USDT"},
        )
        payload = self._parse(_BinanceTicker, data)
        return self._to_float(payload.price)


class CoinbaseRateAdapter(BaseRateAdapter):
    """``/exchange-rates?currency=<CURRENCY>``, reading the USD rate."""

    @property
    def adapter_name(self) -> str:
        return "coinbase"

    async def fetch_rate(self, currency: str) -> float | None:
        data = await self._request_json(
            "GET",
            f"{COINBASE_API_URL}/exchange-rates",
            params={"currency": currency.upper()},
        )
        payload = self._parse(_CoinbaseResponse, data)
        return self._to_float(payload.data.rates.get("USD"))
