"""Concurrent per-asset balance collection."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ..adapters.balance_adapters import build_balance_adapters
from ..adapters.base import BalanceRecord
from ..cache import CacheStore
from ..constants import AssetConfig, balance_cache_key
from ..logger import get_logger
from ..settings import WalletSettings
from .chain import FallbackChain
from .policy import CachePolicy, cached_fetch

logger = get_logger(__name__)

BalanceOutcome = BalanceRecord | Exception


def build_balance_chain(
    symbol: str, config: WalletSettings
) -> FallbackChain[str, BalanceRecord]:
    return FallbackChain(
        f"{symbol.upper()} balance", build_balance_adapters(symbol, config)
    )


class BalanceFetcher:
    """Runs one fallback chain per tracked asset, all assets concurrently.

    Each asset resolves independently: the result maps every symbol to a
    ``BalanceRecord`` or to the exception that ended its fetch.
    """

    def __init__(
        self,
        config: WalletSettings,
        cache: CacheStore,
        chains: dict[str, FallbackChain[str, BalanceRecord]] | None = None,
    ):
        self.config = config
        self.cache = cache
        self._chains = dict(chains or {})

    def chain_for(self, symbol: str) -> FallbackChain[str, BalanceRecord]:
        symbol = symbol.upper()
        if symbol not in self._chains:
            self._chains[symbol] = build_balance_chain(symbol, self.config)
        return self._chains[symbol]

    async def fetch_balance(
        self,
        asset: AssetConfig,
        policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH,
    ) -> BalanceRecord:
        """Fetch one wallet's balance under ``policy``.

        Raises:
            ChainExhaustedError: If every provider failed and nothing is cached.
        """
        chain = self.chain_for(asset.symbol)
        return await cached_fetch(
            policy,
            self.cache,
            balance_cache_key(asset.symbol, asset.address),
            lambda: chain.run(asset.address),
            BalanceRecord.to_json,
            BalanceRecord.from_json,
        )

    async def fetch_all(
        self,
        policy: CachePolicy = CachePolicy.WRITE_AFTER_FETCH,
        assets: Iterable[AssetConfig] | None = None,
    ) -> dict[str, BalanceOutcome]:
        """Fetch every tracked wallet concurrently.

        A failure on one asset never cancels or fails the others.
        """
        targets = list(assets if assets is not None else self.config.asset_configs)
        results = await asyncio.gather(
            *(self.fetch_balance(asset, policy) for asset in targets),
            return_exceptions=True,
        )

        outcomes: dict[str, BalanceOutcome] = {}
        for asset, result in zip(targets, results):
            if isinstance(result, BalanceRecord):
                logger.debug("%s balance: %s", asset.symbol, result.balance)
                outcomes[asset.symbol] = result
            elif isinstance(result, Exception):
                logger.error("%s balance unavailable: %s", asset.symbol, result)
                outcomes[asset.symbol] = result
            else:
                raise result
        return outcomes
