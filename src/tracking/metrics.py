# src/tracking/metrics.py — v1
"""In-process counters for duplicate checks.

One DetectorMetrics instance is owned by each DuplicateDetector. The running
average is updated incrementally so no per-check history is kept.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from reqintake.tracking.models import MetricsSnapshot


class DetectorMetrics:
    """Thread-safe recorder of check count, cache hits, errors and latency."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._reset_locked()

    def record_check(
        self, duration_ms: float, cache_hit: bool = False, error: bool = False
    ) -> None:
        with self._lock:
            self._total += 1
            if cache_hit:
                self._cache_hits += 1
            if error:
                self._errors += 1
            self._avg_ms += (duration_ms - self._avg_ms) / self._total

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            total = self._total
            return MetricsSnapshot(
                total_checks=total,
                cache_hits=self._cache_hits,
                errors=self._errors,
                cache_hit_rate=self._cache_hits / total if total else 0.0,
                avg_processing_time_ms=self._avg_ms,
                error_rate=self._errors / total if total else 0.0,
                uptime_s=self._clock() - self._started,
            )

    def reset(self) -> None:
        with self._lock:
            self._reset_locked()

    def _reset_locked(self) -> None:
        self._total = 0
        self._cache_hits = 0
        self._errors = 0
        self._avg_ms = 0.0
        self._started = self._clock()
