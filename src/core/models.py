# src/core/models.py — v1
"""Domain models shared by the detector, the repositories and the intake flow.

Submission is owned by the persistence layer; the detector only reads it.
SimilarityScore and PairResult live for the duration of one check.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

SubmissionStatus = Literal[
    "draft",
    "pending",
    "processing",
    "processed",
    "approved",
    "rejected",
    "on-hold",
]

# Statuses never included in a comparison window.
EXCLUDED_STATUSES: frozenset[str] = frozenset({"draft", "rejected"})


# === SUBMISSIONS ===


class Submission(BaseModel):
    """A previously submitted request, as seen by the duplicate detector."""

    id: str
    title: str
    body: str
    category: str
    created_at: datetime
    status: SubmissionStatus = "pending"
    type: str | None = None

    @field_validator("created_at")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:  # noqa: N805
        """Naive timestamps are taken as UTC."""
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


# === SCORING ===


class SimilarityScore(BaseModel):
    """Per-signal scores for one candidate pair, each in [0, 1]."""

    candidate_id: str
    scores: dict[str, float] = Field(default_factory=dict)


class PairResult(BaseModel):
    """One scored comparison between the incoming request and a submission."""

    submission: Submission
    combined_score: float
    scores: SimilarityScore


# === VERDICT ===


class DuplicateVerdict(BaseModel):
    """Outcome of a duplicate check, returned to the caller (never persisted)."""

    is_duplicate: bool
    matched_submission: Submission | None = None
    combined_score: float | None = None
    component_scores: dict[str, float] = Field(default_factory=dict)
    highest_similarity: float = 0.0
    title_match: bool = False
    body_match: bool = False
    candidates_compared: int = 0
    from_cache: bool = False
