# src/dedup/detector.py — v1
"""Duplicate detector: screens an incoming request against recent submissions.

One call of check_for_duplicate:
  1. Validate title, category and body (InvalidInput, never retried)
  2. Return a fresh cached verdict for the same category / title if any
  3. Fetch the comparison window (same category, recent, not draft/rejected)
  4. Score every candidate in batches (see dedup.scoring)
  5. Take the best pair and compare it with the combined threshold
  6. Cache the verdict

Steps 2 to 6 form one attempt. A failed attempt is retried with linear
backoff (retry_delay * attempt) up to ``similarity_check_retries`` attempts,
each bounded by ``check_timeout_s``; exhaustion raises DuplicateCheckFailed.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from reqintake.cache.base_cache_store import BaseVerdictCache
from reqintake.cache.models import CacheEntry
from reqintake.config.settings import Settings
from reqintake.core.errors import (
    DuplicateCheckFailed,
    InvalidConfiguration,
    InvalidInput,
)
from reqintake.core.models import DuplicateVerdict, PairResult
from reqintake.dedup.metrics import SimilarityMemo
from reqintake.dedup.retrieval import CandidateRetriever
from reqintake.dedup.scoring import PairScorer, PreparedText, select_best
from reqintake.dedup.semantic import SemanticScorer
from reqintake.dedup.text import category_slug, normalize_text
from reqintake.logging.context import clear_context, set_attempt, set_check_context
from reqintake.storage.base_repository import SubmissionRepository
from reqintake.tracking.metrics import DetectorMetrics

logger = logging.getLogger(__name__)

# Stale = older than max_cache_age plus this share of it.
CACHE_GRACE_FACTOR = 0.1

_NON_RETRYABLE = (InvalidInput, InvalidConfiguration)


def cache_key(title: str, category: str) -> str:
    """``similarity:<category-slug>:<normalized title>``."""
    return f"similarity:{category_slug(category)}:{normalize_text(title)}"


def is_stale(entry: CacheEntry, now: float, max_age: float) -> bool:
    return entry.age(now) > max_age * (1.0 + CACHE_GRACE_FACTOR)


def validate_request(title: str | None, category: str | None, body: str | None) -> None:
    """Raise InvalidInput listing every blank field."""
    fields = {"title": title, "category": category, "body": body}
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise InvalidInput(missing)


class DuplicateDetector:
    """Duplicate screening over a submission repository.

    Args:
        repository: Source of the comparison window.
        settings: Thresholds, weights, window, retry and cache settings.
        cache: Verdict cache. Defaults to the process-wide cache when
            ``settings.cache_enabled``; pass one explicitly to isolate.
        semantic: Semantic hook. Defaults to the disabled null scorer.
        metrics: Counter sink. A fresh DetectorMetrics by default.
        sleep: Awaitable used for backoff (patched in tests).
    """

    def __init__(
        self,
        repository: SubmissionRepository,
        settings: Settings | None = None,
        cache: BaseVerdictCache | None = None,
        semantic: SemanticScorer | None = None,
        metrics: DetectorMetrics | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._settings = settings or Settings()
        if cache is None and self._settings.cache_enabled:
            from reqintake.cache.cache_factory import get_shared_cache
            cache = get_shared_cache(self._settings)
        self._cache = cache if self._settings.cache_enabled else None
        self._retriever = CandidateRetriever(
            repository, window_days=self._settings.search_window_days
        )
        self._scorer = PairScorer(self._settings, semantic)
        self._metrics = metrics or DetectorMetrics()
        self._sleep = sleep

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def metrics(self) -> DetectorMetrics:
        return self._metrics

    @property
    def cache(self) -> BaseVerdictCache | None:
        return self._cache

    async def check_for_duplicate(
        self, title: str, category: str, body: str
    ) -> DuplicateVerdict:
        """Screen one request.

        Raises:
            InvalidInput: If title, category or body is blank.
            InvalidConfiguration: If a weight set is inconsistent.
            DuplicateCheckFailed: If every attempt failed.
        """
        validate_request(title, category, body)

        started = time.perf_counter()
        set_check_context(uuid.uuid4().hex[:12], category)
        retries = self._settings.similarity_check_retries
        delay = self._settings.similarity_check_retry_delay
        last_error: BaseException | None = None
        try:
            for attempt in range(1, retries + 1):
                set_attempt(attempt)
                try:
                    verdict = await asyncio.wait_for(
                        self._attempt(title, category, body),
                        timeout=self._settings.check_timeout_s,
                    )
                except _NON_RETRYABLE:
                    self._record(started, error=True)
                    raise
                except asyncio.TimeoutError as e:
                    last_error = e
                    logger.warning(
                        "Attempt %d timed out after %.1fs",
                        attempt, self._settings.check_timeout_s,
                    )
                except Exception as e:
                    last_error = e
                    logger.warning(
                        "Attempt %d failed: %s", attempt, e,
                        extra={"data": {"title": title, "category": category}},
                    )
                else:
                    self._record(started, cache_hit=verdict.from_cache)
                    logger.info(
                        "Similarity check completed",
                        extra={"data": {
                            "is_duplicate": verdict.is_duplicate,
                            "from_cache": verdict.from_cache,
                            "candidates": verdict.candidates_compared,
                            "duration_ms": round(self._elapsed_ms(started), 2),
                        }},
                    )
                    return verdict

                if attempt < retries:
                    await self._sleep(delay * attempt)

            self._record(started, error=True)
            raise DuplicateCheckFailed(last_error, retries) from last_error
        finally:
            clear_context()

    async def _attempt(self, title: str, category: str, body: str) -> DuplicateVerdict:
        key = cache_key(title, category)
        cached = await self._cached_verdict(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        window = await self._retriever.fetch(category)
        incoming = PreparedText.from_raw(title, body, self._settings.min_word_length)
        memo = SimilarityMemo()
        results = await self._scorer.score_all(incoming, window, memo)
        verdict = self._decide(results, len(window))

        if self._cache is not None:
            await self._cache.put(key, verdict)
        return verdict

    async def _cached_verdict(self, key: str) -> DuplicateVerdict | None:
        if self._cache is None:
            return None
        entry = await self._cache.get(key)
        if entry is None:
            return None
        if is_stale(entry, self._cache.now(), self._settings.max_cache_age):
            await self._cache.delete(key)
            return None
        return entry.verdict.model_copy(update={"from_cache": True})

    def _decide(self, results: list[PairResult], candidates: int) -> DuplicateVerdict:
        best = select_best(results)
        if best is None:
            return DuplicateVerdict(is_duplicate=False, candidates_compared=candidates)

        scores = best.scores.scores
        title_match = scores["title_similarity"] >= self._settings.similarity_threshold_title
        body_match = scores["body_similarity"] >= self._settings.similarity_threshold_content
        if best.combined_score >= self._settings.similarity_threshold_combined:
            return DuplicateVerdict(
                is_duplicate=True,
                matched_submission=best.submission,
                combined_score=best.combined_score,
                component_scores=dict(scores),
                highest_similarity=best.combined_score,
                title_match=title_match,
                body_match=body_match,
                candidates_compared=candidates,
            )
        return DuplicateVerdict(
            is_duplicate=False,
            highest_similarity=best.combined_score,
            title_match=title_match,
            body_match=body_match,
            candidates_compared=candidates,
        )

    def _record(self, started: float, cache_hit: bool = False, error: bool = False) -> None:
        self._metrics.record_check(self._elapsed_ms(started), cache_hit=cache_hit, error=error)

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000.0
