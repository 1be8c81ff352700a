# src/cache/models.py — v1
"""Cache domain models: CacheEntry, CacheStats."""

from __future__ import annotations

from pydantic import BaseModel

from reqintake.core.models import DuplicateVerdict


class CacheEntry(BaseModel):
    """Verdict cached under a ``similarity:<category>:<title>`` key.

    ``inserted_at`` and ``expires_at`` are monotonic clock readings (seconds).
    """

    key: str
    verdict: DuplicateVerdict
    inserted_at: float
    expires_at: float

    def age(self, now: float) -> float:
        return now - self.inserted_at


class CacheStats(BaseModel):
    """Counters reported by a verdict cache."""

    hits: int = 0
    misses: int = 0
    keys: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0
