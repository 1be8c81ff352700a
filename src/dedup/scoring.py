# src/dedup/scoring.py — v1
"""Five-signal scoring of an incoming request against stored submissions.

Signals, each in [0, 1]:

- title_similarity: combined edit / Jaccard / cosine of the titles.
- body_similarity: same metrics on the bodies, with body weights.
- title_overlap, body_overlap: keyword overlap boosted by position.
- semantic: pluggable SemanticScorer on the bodies.

The combined score applies the configured weights as given. The default null
semantic scorer contributes 0, so without a real scorer the ceiling is
1 - weight("semantic").

The lexical signals of a pair are computed in a worker thread so the event
loop stays free and a per-attempt timeout can fire mid-batch. Pairs in a
batch are scored concurrently; a pair that fails is logged and dropped, it
never fails the whole check.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from reqintake.config.settings import Settings
from reqintake.core.models import PairResult, SimilarityScore, Submission
from reqintake.dedup.metrics import (
    SimilarityMemo,
    combine_scores,
    keyword_overlap,
    similarity_components,
)
from reqintake.dedup.semantic import NullSemanticScorer, SemanticScorer
from reqintake.dedup.text import normalize_text, ordered_keywords

logger = logging.getLogger(__name__)

SIGNALS = ("title_similarity", "body_similarity", "title_overlap", "body_overlap", "semantic")


@dataclass(frozen=True)
class PreparedText:
    """Normalized title / body and their ordered keywords."""

    title: str
    body: str
    title_keywords: tuple[str, ...]
    body_keywords: tuple[str, ...]

    @classmethod
    def from_raw(cls, title: str, body: str, min_word_length: int = 3) -> PreparedText:
        norm_title = normalize_text(title)
        norm_body = normalize_text(body)
        return cls(
            title=norm_title,
            body=norm_body,
            title_keywords=tuple(ordered_keywords(norm_title, min_word_length)),
            body_keywords=tuple(ordered_keywords(norm_body, min_word_length)),
        )


class PairScorer:
    """Score one incoming request against many submissions."""

    def __init__(
        self,
        settings: Settings,
        semantic: SemanticScorer | None = None,
    ) -> None:
        self._semantic = semantic or NullSemanticScorer()
        self._title_weights = settings.title_weights
        self._body_weights = settings.body_weights
        self._combined_weights = settings.combined_weights
        self._min_word_length = settings.min_word_length
        self._batch_size = settings.batch_size

    @property
    def combined_weights(self) -> dict[str, float]:
        return dict(self._combined_weights)

    @property
    def semantic(self) -> SemanticScorer:
        return self._semantic

    async def score_pair(
        self, incoming: PreparedText, submission: Submission, memo: SimilarityMemo
    ) -> PairResult:
        other = PreparedText.from_raw(
            submission.title, submission.body, self._min_word_length
        )
        scores = await asyncio.to_thread(self._lexical_scores, incoming, other, memo)
        scores["semantic"] = await self._semantic_score(incoming.body, other.body)
        return PairResult(
            submission=submission,
            combined_score=combine_scores(scores, self._combined_weights),
            scores=SimilarityScore(candidate_id=submission.id, scores=scores),
        )

    def _lexical_scores(
        self, incoming: PreparedText, other: PreparedText, memo: SimilarityMemo
    ) -> dict[str, float]:
        """Title / body similarity and keyword overlap of one pair (CPU bound)."""
        title_components = similarity_components(
            incoming.title, other.title, memo, self._min_word_length
        )
        body_components = similarity_components(
            incoming.body, other.body, memo, self._min_word_length
        )
        return {
            "title_similarity": combine_scores(title_components, self._title_weights),
            "body_similarity": combine_scores(body_components, self._body_weights),
            "title_overlap": keyword_overlap(incoming.title_keywords, other.title_keywords),
            "body_overlap": keyword_overlap(incoming.body_keywords, other.body_keywords),
        }

    async def score_batch(
        self,
        incoming: PreparedText,
        batch: Sequence[Submission],
        memo: SimilarityMemo,
    ) -> list[PairResult]:
        """Score a batch concurrently, dropping pairs that raise."""
        outcomes = await asyncio.gather(
            *(self.score_pair(incoming, s, memo) for s in batch),
            return_exceptions=True,
        )
        results: list[PairResult] = []
        for submission, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(
                    "Error scoring submission %s: %s", submission.id, outcome,
                    extra={"data": {"submission_id": submission.id}},
                )
                continue
            results.append(outcome)
        return results

    async def score_all(
        self,
        incoming: PreparedText,
        submissions: Sequence[Submission],
        memo: SimilarityMemo | None = None,
    ) -> list[PairResult]:
        """Score every submission, ``batch_size`` pairs at a time."""
        memo = memo if memo is not None else SimilarityMemo()
        results: list[PairResult] = []
        for start in range(0, len(submissions), self._batch_size):
            batch = submissions[start:start + self._batch_size]
            results.extend(await self.score_batch(incoming, batch, memo))
            if len(submissions) > self._batch_size:
                logger.debug(
                    "Scored %d/%d submissions", min(start + len(batch), len(submissions)),
                    len(submissions),
                )
        return results

    async def _semantic_score(self, text_a: str, text_b: str) -> float:
        if not self._semantic.enabled:
            return 0.0
        try:
            value = await self._semantic.score(text_a, text_b)
        except Exception as e:
            logger.warning("Semantic scorer %s failed: %s", self._semantic.name, e)
            return 0.0
        return min(1.0, max(0.0, float(value)))


def select_best(results: Sequence[PairResult]) -> PairResult | None:
    """Highest combined score; ties go to the newest submission."""
    if not results:
        return None
    ranked = sorted(
        results,
        key=lambda r: (r.combined_score, r.submission.created_at),
        reverse=True,
    )
    return ranked[0]
