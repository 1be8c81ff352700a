# tests/unit/cache/test_unit_memory_store.py — v1
"""Tests for cache/memory_store.py — TTL, bound, stats."""

from __future__ import annotations

import pytest

from reqintake.cache.memory_store import MemoryVerdictCache
from reqintake.core.models import DuplicateVerdict


@pytest.fixture
def verdict() -> DuplicateVerdict:
    return DuplicateVerdict(is_duplicate=False, highest_similarity=0.42)


class TestMemoryVerdictCache:
    @pytest.mark.asyncio
    async def test_put_and_get(self, verdict_cache, verdict):
        await verdict_cache.put("k", verdict)
        entry = await verdict_cache.get("k")
        assert entry is not None
        assert entry.key == "k"
        assert entry.verdict.highest_similarity == 0.42

    @pytest.mark.asyncio
    async def test_get_missing(self, verdict_cache):
        assert await verdict_cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_expires_after_ttl(self, verdict_cache, verdict, clock):
        await verdict_cache.put("k", verdict)
        clock.advance(3599)
        assert await verdict_cache.get("k") is not None
        clock.advance(1)
        assert await verdict_cache.get("k") is None
        assert len(verdict_cache) == 0

    @pytest.mark.asyncio
    async def test_per_entry_ttl(self, verdict_cache, verdict, clock):
        await verdict_cache.put("short", verdict, ttl=10)
        clock.advance(11)
        assert await verdict_cache.get("short") is None

    @pytest.mark.asyncio
    async def test_evicts_oldest_inserted(self, clock, verdict):
        cache = MemoryVerdictCache(ttl=60, max_keys=2, clock=clock)
        await cache.put("a", verdict)
        await cache.put("b", verdict)
        await cache.get("a")  # reads do not refresh insertion order
        await cache.put("c", verdict)
        assert await cache.get("a") is None
        assert await cache.get("b") is not None
        assert await cache.get("c") is not None

    @pytest.mark.asyncio
    async def test_reinsert_refreshes_order(self, clock, verdict):
        cache = MemoryVerdictCache(ttl=60, max_keys=2, clock=clock)
        await cache.put("a", verdict)
        await cache.put("b", verdict)
        await cache.put("a", verdict)
        await cache.put("c", verdict)
        assert await cache.get("b") is None
        assert await cache.get("a") is not None

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, verdict_cache, verdict):
        await verdict_cache.put("a", verdict)
        await verdict_cache.put("b", verdict)
        await verdict_cache.delete("a")
        await verdict_cache.delete("missing")
        assert await verdict_cache.get("a") is None
        await verdict_cache.clear()
        assert len(verdict_cache) == 0
        assert verdict_cache.stats().hits == 0

    @pytest.mark.asyncio
    async def test_stats(self, verdict_cache, verdict, clock):
        await verdict_cache.put("a", verdict)
        await verdict_cache.put("b", verdict, ttl=5)
        await verdict_cache.get("a")
        await verdict_cache.get("x")
        clock.advance(10)
        stats = verdict_cache.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.keys == 1
        assert stats.hit_rate == pytest.approx(0.5)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            MemoryVerdictCache(ttl=0)
        with pytest.raises(ValueError):
            MemoryVerdictCache(max_keys=0)

    def test_now_uses_clock(self, verdict_cache, clock):
        assert verdict_cache.now() == clock.now
