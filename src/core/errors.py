# src/core/errors.py — v1
"""Error kinds raised by the duplicate detector and the intake flow.

Transient errors (RetrievalError, timeouts) are retried by the detector.
InvalidInput and InvalidConfiguration surface immediately.
"""

from __future__ import annotations


class ReqIntakeError(Exception):
    """Base class for all reqintake errors."""


class InvalidInput(ReqIntakeError):
    """A required field (title, category, body) is missing or blank."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required parameters: {', '.join(missing)}")


class InvalidConfiguration(ReqIntakeError):
    """Configuration is internally inconsistent (e.g. weights not summing to 1).

    Deliberately not a ValueError subclass so that pydantic validators
    let it propagate unwrapped.
    """


class RetrievalError(ReqIntakeError):
    """The persistence query for comparison candidates failed."""

    def __init__(self, category: str, original: BaseException) -> None:
        self.category = category
        self.original = original
        super().__init__(
            f"Failed to fetch comparison data for category {category!r}: {original}"
        )


class DuplicateCheckFailed(ReqIntakeError):
    """All attempts of a duplicate check failed."""

    def __init__(self, last_error: BaseException, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            f"Failed to perform similarity check after {attempts} attempts: "
            f"{type(last_error).__name__}: {last_error}"
        )
