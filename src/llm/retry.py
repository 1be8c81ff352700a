# src/llm/retry.py — v1
"""Retry policy for text analysis provider calls.

Errors are classified by the provider SDK's exception name and HTTP status
(``status_code`` attribute when present). Only rate limits, timeouts,
connection failures and 5xx responses are retried; anything else surfaces
on the first failure.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from reqintake.core.errors import ReqIntakeError

logger = logging.getLogger(__name__)


class ProviderRetryExhausted(ReqIntakeError):
    """All retries exhausted for a provider call."""

    def __init__(self, operation: str, error_type: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation} failed after {attempts} attempt(s) ({error_type}): {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for one error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=3, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=2, base_delay_s=1.0, backoff_factor=1.0),
    "connection": RetryConfig(max_retries=2, base_delay_s=1.0),
    "server_error": RetryConfig(max_retries=3, base_delay_s=5.0),
}


def classify_error(error: Exception) -> str:
    """Map a provider exception to a retry error type ("unknown" = no retry)."""
    name = type(error).__name__.lower()
    status = getattr(error, "status_code", None)

    if status == 429 or "ratelimit" in name:
        return "rate_limit"
    if "timeout" in name or isinstance(error, asyncio.TimeoutError):
        return "timeout"
    if "connection" in name or isinstance(error, ConnectionError):
        return "connection"
    if isinstance(status, int) and 500 <= status < 600:
        return "server_error"
    if "internalserver" in name or "overloaded" in name:
        return "server_error"
    return "unknown"


def compute_delay(config: RetryConfig, attempt: int) -> float:
    """Delay before retry number ``attempt`` (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "provider call",
    retry_configs: dict[str, RetryConfig] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Await ``fn(*args, **kwargs)``, retrying transient provider errors.

    Raises:
        ProviderRetryExhausted: If the error is not retryable or retries ran out.
    """
    configs = retry_configs if retry_configs is not None else DEFAULT_RETRY_CONFIGS
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1
            config = configs.get(error_type)

            if config is None or attempts > config.max_retries:
                raise ProviderRetryExhausted(operation, error_type, attempts, e) from e

            delay = compute_delay(config, attempts - 1)
            logger.warning(
                "%s: %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await sleep(delay)
