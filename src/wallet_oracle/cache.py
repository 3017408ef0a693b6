"""Shared key/value cache used by the fetch policies.

The cache is best-effort: backend failures are raised internally as
``CacheFault`` and swallowed by ``CacheStore`` so that an outage behaves
exactly like an empty cache.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

import backoff
import redis

from .logger import get_logger

logger = get_logger(__name__)


class CacheFault(Exception):
    """A cache read or write failed."""

    def __init__(self, operation: str, key: str, cause: BaseException):
        self.operation = operation
        self.key = key
        self.cause = cause
        super().__init__(f"cache {operation} failed for '{key}': {cause}")


class CacheStore(ABC):
    """get/set over a shared cache. No TTL, last writer wins."""

    @abstractmethod
    async def _get(self, key: str) -> str | None:
        """Read a raw value, raising ``CacheFault`` on backend failure."""
        ...

    @abstractmethod
    async def _set(self, key: str, value: str) -> None:
        """Write a raw value, raising ``CacheFault`` on backend failure."""
        ...

    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None on miss or fault."""
        try:
            return await self._get(key)
        except CacheFault as e:
            logger.warning("%s; treating as cache miss", e)
            return None

    async def set(self, key: str, value: str) -> None:
        """Overwrite ``key``. Faults are logged and dropped."""
        try:
            await self._set(key, value)
        except CacheFault as e:
            logger.warning("%s; value not cached", e)

    def close(self) -> None:
        """Release backend resources."""


class MemoryCacheStore(CacheStore):
    """Process-local cache, used when no Redis URL is configured."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def _get(self, key: str) -> str | None:
        return self._data.get(key)

    async def _set(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class RedisCacheStore(CacheStore):
    """Redis-backed cache. The sync client is driven from worker threads."""

    def __init__(self, client: redis.Redis):
        self._client = client

    async def _get(self, key: str) -> str | None:
        try:
            value: Any = await asyncio.to_thread(self._client.get, key)
        except (redis.RedisError, UnicodeDecodeError) as e:
            raise CacheFault("get", key, e) from e
        if isinstance(value, bytes):
            try:
                return value.decode()
            except UnicodeDecodeError as e:
                raise CacheFault("get", key, e) from e
        return value

    async def _set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._client.set, key, value)
        except (redis.RedisError, UnicodeError) as e:
            raise CacheFault("set", key, e) from e

    def close(self) -> None:
        self._client.close()


def connect_cache(redis_url: str | None, max_tries: int = 3) -> CacheStore:
    """Open the process-wide cache handle.

    Args:
        redis_url: Redis connection URL. When None, a process-local memory
            cache is returned instead.
        max_tries: Connection attempts before giving up.

    Returns:
        A connected cache store.

    Raises:
        redis.ConnectionError: If Redis stays unreachable after ``max_tries``.
    """
    if not redis_url:
        logger.warning(
            "No redis_url configured; using a process-local cache (not shared)"
        )
        return MemoryCacheStore()

    @backoff.on_exception(
        backoff.expo,
        (redis.ConnectionError, redis.TimeoutError),
        max_tries=max_tries,
        jitter=backoff.full_jitter,
    )
    def _connect() -> redis.Redis:
        client = redis.Redis.from_url(redis_url, decode_responses=True)
        client.ping()
        return client

    client = _connect()
    logger.info("Connected to Redis cache")
    return RedisCacheStore(client)
