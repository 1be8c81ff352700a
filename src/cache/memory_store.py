# src/cache/memory_store.py — v1
"""In-process verdict cache with TTL and a key bound.

Entries expire ``ttl`` seconds after insertion. When ``max_keys`` is reached
the oldest inserted entry is evicted. A single lock guards every read and
write, so one instance may be shared by concurrent checks and threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from reqintake.cache.base_cache_store import BaseVerdictCache
from reqintake.cache.models import CacheEntry, CacheStats
from reqintake.core.models import DuplicateVerdict

logger = logging.getLogger(__name__)


class MemoryVerdictCache(BaseVerdictCache):
    """Bounded, TTL'd dict of verdicts keyed by cache key."""

    def __init__(
        self,
        ttl: float = 3600.0,
        max_keys: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        if max_keys < 1:
            raise ValueError("max_keys must be >= 1")
        self._ttl = ttl
        self._max_keys = max_keys
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def now(self) -> float:
        return self._clock()

    async def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= self._clock():
                del self._entries[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry

    async def put(
        self, key: str, verdict: DuplicateVerdict, ttl: float | None = None
    ) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(
            key=key,
            verdict=verdict,
            inserted_at=now,
            expires_at=now + (ttl if ttl is not None else self._ttl),
        )
        with self._lock:
            # Re-inserting moves the key to the young end of the order.
            self._entries.pop(key, None)
            self._entries[key] = entry
            self._evict_locked(now)
        return entry

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            live = sum(1 for e in self._entries.values() if e.expires_at > now)
            return CacheStats(hits=self._hits, misses=self._misses, keys=live)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_locked(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        while len(self._entries) > self._max_keys:
            key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry %s", key)
