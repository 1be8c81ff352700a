# src/cache/base_cache_store.py — v1
"""Abstract verdict cache interface."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

from reqintake.cache.models import CacheEntry, CacheStats
from reqintake.core.models import DuplicateVerdict


class BaseVerdictCache(ABC):
    """Unified interface for duplicate-verdict cache backends."""

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key``, or None if absent or expired."""

    @abstractmethod
    async def put(
        self, key: str, verdict: DuplicateVerdict, ttl: float | None = None
    ) -> CacheEntry:
        """Store a verdict, overwriting any previous entry for ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an entry (no-op when absent)."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all entries and reset counters."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Hit / miss counters and the number of live keys."""

    def now(self) -> float:
        """Clock used for insertion times (monotonic seconds)."""
        return time.monotonic()
