# src/intake/models.py — v1
"""Request intake models: RequestInput, analysis results, SubmissionOutcome."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from reqintake.core.models import DuplicateVerdict, Submission

TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 10000


class RequestInput(BaseModel):
    """A new opinion request as submitted by a user."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    department: str = Field(min_length=1)
    type: str = Field(min_length=1)
    content: str = Field(min_length=CONTENT_MIN_LENGTH, max_length=CONTENT_MAX_LENGTH)

    @field_validator("title", "department", "type", "content", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:  # noqa: N805
        return v.strip() if isinstance(v, str) else v


class RequestAnalysis(BaseModel):
    """Structured analysis extracted from the provider reply."""

    summary: str = ""
    trends: list[str] = Field(default_factory=list)
    impact_assessment: str = ""
    policy_alignment: str = ""


class RequestRecommendations(BaseModel):
    """Structured recommendations extracted from the provider reply."""

    strategic: list[str] = Field(default_factory=list)
    operational: list[str] = Field(default_factory=list)
    timeline: str = ""
    risks: list[str] = Field(default_factory=list)


class ProcessedRequest(BaseModel):
    """Request enriched with analysis and recommendations."""

    request: RequestInput
    analysis: RequestAnalysis
    recommendations: RequestRecommendations
    processing_version: str = "1.0"
    processed_at: datetime


class SubmissionOutcome(BaseModel):
    """Result of IntakeService.submit."""

    status: Literal["duplicate", "accepted"]
    submission: Submission | None = None
    processed: ProcessedRequest | None = None
    verdict: DuplicateVerdict | None = None
    check_bypassed: bool = False

    @property
    def is_duplicate(self) -> bool:
        return self.status == "duplicate"

    @property
    def original(self) -> Submission | None:
        """The earlier submission this request duplicates, if any."""
        return self.verdict.matched_submission if self.verdict else None
