"""
Tests for the write-once entry cache.
"""
import asyncio

import pytest

from pokedex.catalog.schemas import CatalogEntry
from pokedex.catalog.store import EntryCache


def make_entry(entry_id, name=None):
    return CatalogEntry(id=entry_id, name=name or f"mon{entry_id}", categories=["normal"])


class TestPut:

    def test_put_and_get(self):
        cache = EntryCache()
        entry = make_entry(1)

        assert cache.put(entry) is entry
        assert cache.get(1) is entry
        assert 1 in cache
        assert len(cache) == 1

    def test_put_is_write_once(self):
        cache = EntryCache()
        first = make_entry(1, "bulbasaur")
        cache.put(first)

        kept = cache.put(make_entry(1, "impostor"))

        assert kept is first
        assert cache.get(1).name == "bulbasaur"

    def test_get_missing(self):
        assert EntryCache().get(42) is None


class TestGetOrFetch:

    @pytest.mark.asyncio
    async def test_miss_fetches_and_stores(self):
        cache = EntryCache()
        calls = []

        async def fetch(entry_id):
            calls.append(entry_id)
            return make_entry(entry_id)

        entry = await cache.get_or_fetch(3, fetch)

        assert entry.id == 3
        assert cache.get(3) is entry
        assert calls == [3]

    @pytest.mark.asyncio
    async def test_hit_skips_fetch(self):
        cache = EntryCache()
        cache.put(make_entry(3))

        async def fetch(entry_id):
            raise AssertionError("should not fetch a cached id")

        assert (await cache.get_or_fetch(3, fetch)).id == 3

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_fetch(self):
        cache = EntryCache()
        release = asyncio.Event()
        calls = []

        async def fetch(entry_id):
            calls.append(entry_id)
            await release.wait()
            return make_entry(entry_id)

        waiters = [asyncio.ensure_future(cache.get_or_fetch(9, fetch)) for _ in range(3)]
        await asyncio.sleep(0)
        assert cache.in_flight(9)

        release.set()
        results = await asyncio.gather(*waiters)

        assert calls == [9]
        assert all(r is results[0] for r in results)
        assert not cache.in_flight(9)

    @pytest.mark.asyncio
    async def test_cancelled_waiter_leaves_shared_fetch_running(self):
        cache = EntryCache()
        release = asyncio.Event()
        calls = []

        async def fetch(entry_id):
            calls.append(entry_id)
            await release.wait()
            return make_entry(entry_id)

        dropped = asyncio.ensure_future(cache.get_or_fetch(5, fetch))
        kept = asyncio.ensure_future(cache.get_or_fetch(5, fetch))
        await asyncio.sleep(0)

        dropped.cancel()
        await asyncio.sleep(0)
        release.set()

        entry = await kept
        assert dropped.cancelled()
        assert entry.id == 5
        assert cache.get(5) is entry
        assert calls == [5]

    @pytest.mark.asyncio
    async def test_failure_propagates_and_is_not_stored(self):
        cache = EntryCache()

        async def fetch(entry_id):
            raise RuntimeError("network down")

        with pytest.raises(RuntimeError):
            await cache.get_or_fetch(2, fetch)

        assert cache.get(2) is None
        assert not cache.in_flight(2)
