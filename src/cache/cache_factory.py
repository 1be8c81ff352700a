# src/cache/cache_factory.py — v1
"""Factory for the process-wide verdict cache."""

from __future__ import annotations

import threading

from reqintake.cache.base_cache_store import BaseVerdictCache
from reqintake.config.settings import Settings

_shared: BaseVerdictCache | None = None
_shared_lock = threading.Lock()


def create_cache_store(settings: Settings | None = None) -> BaseVerdictCache:
    """Instantiate a new in-memory verdict cache.

    Args:
        settings: Application settings. Defaults to 3600 s TTL / 1000 keys.
    """
    from reqintake.cache.memory_store import MemoryVerdictCache

    if settings is None:
        return MemoryVerdictCache()
    return MemoryVerdictCache(ttl=settings.cache_ttl, max_keys=settings.cache_max_keys)


def get_shared_cache(settings: Settings | None = None) -> BaseVerdictCache:
    """Return the process singleton, creating it on first use.

    ``settings`` only affects the first call.
    """
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = create_cache_store(settings)
        return _shared


def reset_shared_cache() -> None:
    """Drop the process singleton (tests, settings reload)."""
    global _shared
    with _shared_lock:
        _shared = None
