"""Cache-aside policies wrapping a fallback chain run."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from ..cache import CacheStore
from ..logger import get_logger
from .chain import ChainExhaustedError

logger = get_logger(__name__)

T = TypeVar("T")


class CachePolicy(str, Enum):
    """How a fetch uses the cache.

    READ_PREFERRED serves a cached value without touching the network and
    only fetches on a miss. WRITE_AFTER_FETCH always fetches, refreshes the
    cache on success, and falls back to the cached value when the chain is
    exhausted.
    """

    READ_PREFERRED = "read-preferred"
    WRITE_AFTER_FETCH = "write-after-fetch"


async def _read_cached(
    cache: CacheStore, key: str, decode: Callable[[str], T]
) -> T | None:
    raw = await cache.get(key)
    if raw is None:
        return None
    try:
        return decode(raw)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Ignoring undecodable cache entry '%s': %s", key, e)
        return None


async def fetch_write_after(
    cache: CacheStore,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    encode: Callable[[T], str],
    decode: Callable[[str], T],
) -> T:
    """Fetch live, cache on success, serve stale on exhaustion.

    Raises:
        ChainExhaustedError: If the chain failed and nothing is cached.
    """
    try:
        value = await fetch()
    except ChainExhaustedError as e:
        cached = await _read_cached(cache, key, decode)
        if cached is None:
            raise
        logger.warning("%s; serving cached value for '%s'", e, key)
        return cached

    await cache.set(key, encode(value))
    return value


async def fetch_read_preferred(
    cache: CacheStore,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    encode: Callable[[T], str],
    decode: Callable[[str], T],
) -> T:
    """Serve from cache when present, otherwise behave as write-after-fetch."""
    cached = await _read_cached(cache, key, decode)
    if cached is not None:
        logger.debug("Cache hit for '%s'", key)
        return cached
    return await fetch_write_after(cache, key, fetch, encode, decode)


async def cached_fetch(
    policy: CachePolicy,
    cache: CacheStore,
    key: str,
    fetch: Callable[[], Awaitable[T]],
    encode: Callable[[T], str],
    decode: Callable[[str], T],
) -> T:
    """Dispatch to the selected policy."""
    if policy is CachePolicy.READ_PREFERRED:
        return await fetch_read_preferred(cache, key, fetch, encode, decode)
    return await fetch_write_after(cache, key, fetch, encode, decode)
