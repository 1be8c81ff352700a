# src/intake/service.py — v1
"""Request intake service: duplicate screening, processing, persistence.

The duplicate check is the gate. What happens when the check itself fails
(DuplicateCheckFailed) is a policy of this service, not of the detector:
with ``block_on_check_failure`` the error propagates and nothing is stored;
otherwise the failure is logged and the request goes through unscreened.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from reqintake.core.errors import DuplicateCheckFailed
from reqintake.core.models import DuplicateVerdict, Submission
from reqintake.dedup.detector import DuplicateDetector, cache_key
from reqintake.intake.models import ProcessedRequest, RequestInput, SubmissionOutcome
from reqintake.intake.processor import RequestProcessor
from reqintake.storage.base_repository import SubmissionRepository

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def new_reference_number() -> str:
    """``REQ-<base36 epoch ms><3 random chars>``, e.g. REQ-LZ3K9Q1A7XB."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(3))
    return f"REQ-{_to_base36(time.time_ns() // 1_000_000)}{suffix}"


class IntakeService:
    """Submit new requests through the duplicate gate.

    Args:
        detector: Duplicate detector over the same repository.
        repository: Where accepted requests are stored.
        processor: Provider-backed analysis. None stores requests unprocessed
            with status "pending".
        block_on_check_failure: Re-raise DuplicateCheckFailed instead of
            accepting the request unscreened.
    """

    def __init__(
        self,
        detector: DuplicateDetector,
        repository: SubmissionRepository,
        processor: RequestProcessor | None = None,
        block_on_check_failure: bool = False,
    ) -> None:
        self._detector = detector
        self._repository = repository
        self._processor = processor
        self._block_on_check_failure = block_on_check_failure

    async def submit(self, request: RequestInput) -> SubmissionOutcome:
        """Screen, process and store one request.

        Raises:
            DuplicateCheckFailed: If the check failed and the service blocks
                on check failures.
        """
        verdict: DuplicateVerdict | None = None
        bypassed = False
        try:
            verdict = await self._detector.check_for_duplicate(
                request.title, request.department, request.content
            )
        except DuplicateCheckFailed as e:
            if self._block_on_check_failure:
                logger.error("Duplicate check failed, submission blocked: %s", e)
                raise
            bypassed = True
            logger.warning(
                "Duplicate check failed, accepting request unscreened: %s", e,
                extra={"data": {"title": request.title, "attempts": e.attempts}},
            )

        if verdict is not None and verdict.is_duplicate:
            matched = verdict.matched_submission
            logger.info(
                "Duplicate of %s rejected", matched.id if matched else "?",
                extra={"data": {"score": verdict.combined_score}},
            )
            return SubmissionOutcome(status="duplicate", verdict=verdict)

        processed: ProcessedRequest | None = None
        if self._processor is not None:
            processed = await self._processor.process(request)

        submission = Submission(
            id=new_reference_number(),
            title=request.title,
            body=request.content,
            category=request.department,
            type=request.type,
            status="processed" if processed is not None else "pending",
            created_at=datetime.now(timezone.utc),
        )
        await self._repository.add(submission)
        await self._forget_verdict(request)
        logger.info("Stored request %s (%s)", submission.id, submission.status)
        return SubmissionOutcome(
            status="accepted",
            submission=submission,
            processed=processed,
            verdict=verdict,
            check_bypassed=bypassed,
        )

    async def _forget_verdict(self, request: RequestInput) -> None:
        # A cached "no duplicate" verdict for this title is wrong once it is stored.
        cache = self._detector.cache
        if cache is not None:
            await cache.delete(cache_key(request.title, request.department))
