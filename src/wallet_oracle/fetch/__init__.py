from __future__ import annotations

from .balances import BalanceFetcher, BalanceOutcome, build_balance_chain
from .chain import ChainExhaustedError, FallbackChain
from .policy import (
    CachePolicy,
    cached_fetch,
    fetch_read_preferred,
    fetch_write_after,
)
from .prices import PriceFetcher, build_price_chain

__all__ = [
    "BalanceFetcher",
    "BalanceOutcome",
    "CachePolicy",
    "ChainExhaustedError",
    "FallbackChain",
    "PriceFetcher",
    "build_balance_chain",
    "build_price_chain",
    "cached_fetch",
    "fetch_read_preferred",
    "fetch_write_after",
]
