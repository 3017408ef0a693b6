"""Multi-symbol USD quote fetching."""

from __future__ import annotations

from ..adapters.price_adapters import PRICE_ADAPTERS, PriceQuote
from ..cache import CacheStore
from ..constants import PRICE_CACHE_KEY
from ..settings import WalletSettings
from .chain import FallbackChain
from .policy import CachePolicy, cached_fetch


def build_price_chain(config: WalletSettings) -> FallbackChain[list[str], PriceQuote]:
    return FallbackChain(
        "price quote", [AdapterClass(config) for AdapterClass in PRICE_ADAPTERS]
    )


class PriceFetcher:
    """One quote request covering every tracked symbol.

    Symbols the provider leaves out are simply absent from the quote; only a
    failed request reaches the cache-fallback / error path.
    """

    def __init__(
        self,
        config: WalletSettings,
        cache: CacheStore,
        chain: FallbackChain[list[str], PriceQuote] | None = None,
    ):
        self.config = config
        self.cache = cache
        self.chain = chain if chain is not None else build_price_chain(config)

    async def fetch_prices(
        self,
        policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH,
        symbols: list[str] | None = None,
    ) -> PriceQuote:
        """Fetch quotes for ``symbols`` (default: every tracked wallet).

        Raises:
            ChainExhaustedError: If the quote request failed and nothing is cached.
        """
        requested = [s.upper() for s in (symbols or self.config.symbols)]
        return await cached_fetch(
            policy,
            self.cache,
            PRICE_CACHE_KEY,
            lambda: self.chain.run(requested),
            PriceQuote.to_json,
            PriceQuote.from_json,
        )
