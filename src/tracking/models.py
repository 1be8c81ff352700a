# src/tracking/models.py — v1
"""Tracking domain models: MetricsSnapshot."""

from __future__ import annotations

from pydantic import BaseModel


class MetricsSnapshot(BaseModel):
    """Point-in-time view of duplicate-check counters since the last reset."""

    total_checks: int = 0
    cache_hits: int = 0
    errors: int = 0
    cache_hit_rate: float = 0.0
    avg_processing_time_ms: float = 0.0
    error_rate: float = 0.0
    uptime_s: float = 0.0
