from __future__ import annotations

import pytest

from wallet_oracle.adapters.price_adapters import PriceQuote
from wallet_oracle.constants import PRICE_CACHE_KEY
from wallet_oracle.fetch.chain import ChainExhaustedError, FallbackChain
from wallet_oracle.fetch.policy import CachePolicy
from wallet_oracle.fetch.prices import PriceFetcher


@pytest.mark.asyncio
async def test_requests_every_tracked_symbol(settings, cache, fake_adapter):
    adapter = fake_adapter("quotes", result=PriceQuote(prices={"BTC": 60000.0}))
    fetcher = PriceFetcher(settings, cache, chain=FallbackChain("price quote", [adapter]))

    quote = await fetcher.fetch_prices()

    assert adapter.calls == [["BTC", "ETH"]]
    assert quote.price_for("btc") == 60000.0
    assert quote.price_for("ETH") is None
    assert PriceQuote.from_json(await cache.get(PRICE_CACHE_KEY)) == quote


@pytest.mark.asyncio
async def test_failed_quote_falls_back_to_cache(settings, cache, fake_adapter):
    await cache.set(PRICE_CACHE_KEY, '{"BTC": 59000.0, "ETH": 3000.0}')
    adapter = fake_adapter("quotes", error="HTTP 401 - bad key")
    fetcher = PriceFetcher(settings, cache, chain=FallbackChain("price quote", [adapter]))

    quote = await fetcher.fetch_prices(CachePolicy.WRITE_AFTER_FETCH)

    assert quote.prices == {"BTC": 59000.0, "ETH": 3000.0}


@pytest.mark.asyncio
async def test_failed_quote_without_cache_raises(settings, cache, fake_adapter):
    adapter = fake_adapter("quotes", error="HTTP 401 - bad key")
    fetcher = PriceFetcher(settings, cache, chain=FallbackChain("price quote", [adapter]))

    with pytest.raises(ChainExhaustedError, match="price quote"):
        await fetcher.fetch_prices()
