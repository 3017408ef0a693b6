from __future__ import annotations

from pydantic import BaseModel

from ...constants import COINMARKETCAP_API_URL
from ...logger import get_logger
from .base import BasePriceAdapter, PriceQuote

logger = get_logger(__name__)


class _UsdQuote(BaseModel):
    price: float | None = None


class _Quote(BaseModel):
    USD: _UsdQuote


class _Coin(BaseModel):
    symbol: str
    quote: _Quote


class _QuotesLatest(BaseModel):
    data: dict[str, _Coin]


class CoinMarketCapAdapter(BasePriceAdapter):
    """Multi-symbol USD quotes from ``/cryptocurrency/quotes/latest``.

    A symbol missing from ``data`` (or quoted without a price) is left out of
    the returned quote; only a failed request is an error.
    """

    @property
    def adapter_name(self) -> str:
        return "coinmarketcap"

    async def fetch_quotes(self, symbols: list[str]) -> PriceQuote:
        data = await self._request_json(
            "GET",
            f"{COINMARKETCAP_API_URL}/cryptocurrency/quotes/latest",
            params={"symbol": ",".join(s.upper() for s in symbols)},
            headers={
                "X-CMC_PRO_API_KEY": self.config.secret("coinmarketcap_api_key"),
                "Accept": "application/json",
            },
        )
        payload = self._parse(_QuotesLatest, data)

        prices: dict[str, float] = {}
        for key, coin in payload.data.items():
            price = coin.quote.USD.price
            if price is None:
                logger.debug("%s: no USD price for %s", self.adapter_name, key)
                continue
            prices[key.upper()] = price

        missing = sorted({s.upper() for s in symbols} - set(prices))
        if missing:
            logger.warning(
                "%s: no quote returned for %s", self.adapter_name, ", ".join(missing)
            )
        return PriceQuote(prices=prices)
