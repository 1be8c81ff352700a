# src/dedup/retrieval.py — v1
"""Comparison-window retrieval for the duplicate detector.

The window is: same category, created within the last ``window_days`` days,
status not draft / rejected, newest first. The repository is asked for
exactly that, and the result is filtered again here so a lax backend can
never widen the window.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from reqintake.core.errors import RetrievalError
from reqintake.core.models import EXCLUDED_STATUSES, Submission
from reqintake.storage.base_repository import SubmissionRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CandidateRetriever:
    """Fetch the recent submissions an incoming request is compared against."""

    def __init__(
        self,
        repository: SubmissionRepository,
        window_days: int = 180,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        if window_days < 1:
            raise ValueError("window_days must be >= 1")
        self._repository = repository
        self._window = timedelta(days=window_days)
        self._now = now

    def horizon(self) -> datetime:
        """Oldest creation time still inside the window."""
        return self._now() - self._window

    async def fetch(self, category: str) -> list[Submission]:
        """Return the comparison window for ``category``.

        Raises:
            RetrievalError: If the repository query fails for any reason.
        """
        since = self.horizon()
        try:
            found = await self._repository.find_recent_submissions(
                category, since, EXCLUDED_STATUSES
            )
        except Exception as e:
            logger.error(
                "Failed to fetch recent submissions",
                extra={"data": {"category": category, "error": str(e)}},
            )
            raise RetrievalError(category, e) from e

        window = [
            s for s in found
            if s.category == category
            and s.created_at >= since
            and s.status not in EXCLUDED_STATUSES
        ]
        if len(window) != len(found):
            logger.warning(
                "Repository returned %d submission(s) outside the window",
                len(found) - len(window),
            )
        window.sort(key=lambda s: s.created_at, reverse=True)
        return window
