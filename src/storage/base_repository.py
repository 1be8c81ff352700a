# src/storage/base_repository.py — v1
"""Abstract submission repository interface.

The duplicate detector only reads through find_recent_submissions; the intake
service writes through add.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import datetime

from reqintake.core.models import EXCLUDED_STATUSES, Submission


class SubmissionRepository(ABC):
    """Unified interface for submission storage backends."""

    @abstractmethod
    async def add(self, submission: Submission) -> None:
        """Persist a submission (insert or replace by id)."""

    @abstractmethod
    async def get(self, submission_id: str) -> Submission | None:
        """Return one submission by id, or None."""

    @abstractmethod
    async def find_recent_submissions(
        self,
        category: str,
        since: datetime,
        excluded_statuses: Collection[str] = EXCLUDED_STATUSES,
    ) -> list[Submission]:
        """Submissions of ``category`` created at or after ``since``.

        Submissions whose status is in ``excluded_statuses`` are left out.
        Results are ordered newest first.
        """

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""
