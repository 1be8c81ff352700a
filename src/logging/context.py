# src/logging/context.py — v1
"""Contextual logging: attach check_id, category and attempt to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_check_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "check_id", default=None
)
_category: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "category", default=None
)
_attempt: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "attempt", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current logging context."""

    check_id: str | None = None
    category: str | None = None
    attempt: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    return LogContext(
        check_id=_check_id.get(),
        category=_category.get(),
        attempt=_attempt.get(),
    )


def set_check_context(check_id: str, category: str) -> None:
    """Set per-check context (called once per duplicate check)."""
    _check_id.set(check_id)
    _category.set(category)
    _attempt.set(None)


def set_attempt(attempt: int) -> None:
    _attempt.set(attempt)


def clear_context() -> None:
    _check_id.set(None)
    _category.set(None)
    _attempt.set(None)
