# src/api/facade.py — v1
"""Public API facade: module-level entry points backed by one detector.

Usage:
    from reqintake.api.facade import check_for_duplicate
    verdict = await check_for_duplicate(title, category, body)

The default detector is built on first use from Settings (repository from
DATABASE_PATH, process-wide verdict cache). ``configure`` replaces it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reqintake.config.settings import Settings
from reqintake.core.models import DuplicateVerdict
from reqintake.dedup.detector import DuplicateDetector

if TYPE_CHECKING:
    from reqintake.cache.models import CacheStats
    from reqintake.dedup.semantic import SemanticScorer
    from reqintake.storage.base_repository import SubmissionRepository
    from reqintake.tracking.models import MetricsSnapshot

logger = logging.getLogger(__name__)

_detector: DuplicateDetector | None = None


def configure(
    repository: SubmissionRepository | None = None,
    settings: Settings | None = None,
    semantic: SemanticScorer | None = None,
) -> DuplicateDetector:
    """Build and install the detector used by the module-level functions.

    Args:
        repository: Submission store. Built from settings if None.
        settings: Global settings. Loaded from .env if None.
        semantic: Semantic hook. The disabled null scorer if None.
    """
    global _detector
    settings = settings or Settings()
    if repository is None:
        from reqintake.storage.repository_factory import create_repository
        repository = create_repository(settings)
    _detector = DuplicateDetector(repository, settings=settings, semantic=semantic)
    logger.debug("Configured default detector (cache_enabled=%s)", settings.cache_enabled)
    return _detector


def get_detector() -> DuplicateDetector:
    """Return the default detector, configuring it from settings if needed."""
    return _detector if _detector is not None else configure()


def reset() -> None:
    """Forget the default detector."""
    global _detector
    _detector = None


async def check_for_duplicate(title: str, category: str, body: str) -> DuplicateVerdict:
    """Screen a request with the default detector.

    Raises:
        InvalidInput: If title, category or body is blank.
        DuplicateCheckFailed: If every attempt failed.
    """
    return await get_detector().check_for_duplicate(title, category, body)


def get_metrics() -> MetricsSnapshot:
    return get_detector().metrics.snapshot()


def reset_metrics() -> None:
    get_detector().metrics.reset()


def get_cache_stats() -> CacheStats | None:
    """Counters of the verdict cache, or None when caching is disabled."""
    cache = get_detector().cache
    return cache.stats() if cache is not None else None


async def clear_cache() -> None:
    cache = get_detector().cache
    if cache is not None:
        await cache.clear()
