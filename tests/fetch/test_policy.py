from __future__ import annotations

import pytest

from wallet_oracle.adapters.base import BalanceRecord
from wallet_oracle.fetch.chain import ChainExhaustedError
from wallet_oracle.fetch.policy import (
    CachePolicy,
    cached_fetch,
    fetch_read_preferred,
    fetch_write_after,
)

KEY = "btc_balance_addr"


def _fetcher(result=None, error=None):
    calls = []

    async def fetch():
        calls.append(1)
        if error is not None:
            raise error
        return result

    fetch.calls = calls
    return fetch


@pytest.mark.asyncio
async def test_write_after_fetch_caches_fresh_value(cache):
    record = BalanceRecord(address="addr", balance=1.25)
    fetch = _fetcher(result=record)

    value = await fetch_write_after(
        cache, KEY, fetch, BalanceRecord.to_json, BalanceRecord.from_json
    )

    assert value == record
    assert BalanceRecord.from_json(await cache.get(KEY)) == record


@pytest.mark.asyncio
async def test_read_preferred_after_refresh_makes_no_call(cache):
    record = BalanceRecord(address="addr", balance=0.3)
    await fetch_write_after(
        cache, KEY, _fetcher(result=record), BalanceRecord.to_json, BalanceRecord.from_json
    )

    fetch = _fetcher(result=BalanceRecord(address="addr", balance=99.0))
    value = await fetch_read_preferred(
        cache, KEY, fetch, BalanceRecord.to_json, BalanceRecord.from_json
    )

    assert value.balance == pytest.approx(0.3, abs=1e-9)
    assert fetch.calls == []


@pytest.mark.asyncio
async def test_read_preferred_miss_fetches_and_stores(cache):
    record = BalanceRecord(address="addr", balance=2.0)
    fetch = _fetcher(result=record)

    value = await cached_fetch(
        CachePolicy.READ_PREFERRED,
        cache,
        KEY,
        fetch,
        BalanceRecord.to_json,
        BalanceRecord.from_json,
    )

    assert value == record
    assert fetch.calls == [1]
    assert await cache.get(KEY) == record.to_json()


@pytest.mark.asyncio
async def test_exhausted_chain_serves_stale_value(cache):
    stale = BalanceRecord(address="addr", balance=4.0)
    await cache.set(KEY, stale.to_json())
    fetch = _fetcher(error=ChainExhaustedError("BTC balance", None))

    value = await fetch_write_after(
        cache, KEY, fetch, BalanceRecord.to_json, BalanceRecord.from_json
    )

    assert value == stale
    assert fetch.calls == [1]


@pytest.mark.asyncio
async def test_exhausted_chain_without_cache_propagates(cache):
    fetch = _fetcher(error=ChainExhaustedError("BTC balance", None))

    with pytest.raises(ChainExhaustedError):
        await fetch_write_after(
            cache, KEY, fetch, BalanceRecord.to_json, BalanceRecord.from_json
        )
    assert cache.snapshot() == {}


@pytest.mark.asyncio
async def test_undecodable_cache_entry_counts_as_miss(cache):
    await cache.set(KEY, "not json")
    record = BalanceRecord(address="addr", balance=1.0)
    fetch = _fetcher(result=record)

    value = await fetch_read_preferred(
        cache, KEY, fetch, BalanceRecord.to_json, BalanceRecord.from_json
    )

    assert value == record
    assert fetch.calls == [1]
