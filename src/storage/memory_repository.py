# src/storage/memory_repository.py — v1
"""In-memory submission repository (tests, CLI dry runs)."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime

from reqintake.core.models import EXCLUDED_STATUSES, Submission
from reqintake.storage.base_repository import SubmissionRepository


class InMemorySubmissionRepository(SubmissionRepository):
    """Dict-backed repository keyed by submission id."""

    def __init__(self, submissions: Iterable[Submission] = ()) -> None:
        self._items: dict[str, Submission] = {s.id: s for s in submissions}

    async def add(self, submission: Submission) -> None:
        self._items[submission.id] = submission

    async def get(self, submission_id: str) -> Submission | None:
        return self._items.get(submission_id)

    async def find_recent_submissions(
        self,
        category: str,
        since: datetime,
        excluded_statuses: Collection[str] = EXCLUDED_STATUSES,
    ) -> list[Submission]:
        found = [
            s for s in self._items.values()
            if s.category == category
            and s.created_at >= since
            and s.status not in excluded_statuses
        ]
        return sorted(found, key=lambda s: s.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._items)
