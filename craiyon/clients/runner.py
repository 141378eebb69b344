"""
Retry runner: bounded generate-with-retry loop, failure classification and structured logging.
Budget is max_retries extra attempts after the first; only 429 waits before retrying.
"""
import logging
from asyncio import sleep
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from craiyon.errors import (
    RATE_LIMIT_BACKOFF_SECONDS,
    FailureType,
    RequestError,
    classify_failure,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys for structured logging
LOG_KEYS = (
    "client_version",
    "attempt",
    "max_retries",
    "retries_left",
    "failure_type",
    "retry_allowed",
    "status_code",
    "delay_seconds",
    "error",
)


async def generate_with_retry(
    attempt: Callable[[], Awaitable[T]],
    max_retries: int,
    *,
    backoff_seconds: float = RATE_LIMIT_BACKOFF_SECONDS,
    client_version: int | None = None,
) -> T:
    """
    Await attempt() until it succeeds or the retry budget runs out.

    Makes at most max_retries + 1 calls. When the budget is spent, or the failure is
    not retryable, the last RequestError is re-raised unchanged.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    retries_left = max_retries
    attempt_number = 0

    while True:
        attempt_number += 1
        try:
            result = await attempt()
        except RequestError as e:
            failure_type, retry_allowed = classify_failure(e)
            _log_structured(
                "craiyon_attempt_failed",
                client_version=client_version,
                attempt=attempt_number,
                max_retries=max_retries,
                retries_left=retries_left,
                failure_type=failure_type.value,
                retry_allowed=retry_allowed,
                status_code=e.status_code,
                error=str(e),
            )
            if not retry_allowed or retries_left <= 0:
                raise

            retries_left -= 1
            delay = backoff_seconds if failure_type is FailureType.RATE_LIMITED else 0.0
            logger.info(
                "craiyon_retry_scheduled",
                extra={
                    "client_version": client_version,
                    "attempt": attempt_number,
                    "retries_left": retries_left,
                    "delay_seconds": delay,
                    "failure_type": failure_type.value,
                },
            )
            if delay:
                await sleep(delay)
            continue

        if attempt_number > 1:
            _log_structured(
                "craiyon_success_after_retry",
                client_version=client_version,
                attempt=attempt_number,
                max_retries=max_retries,
            )
        return result


def _log_structured(message: str, **kwargs: Any) -> None:
    """Emit one structured log line for observability."""
    extra = {k: v for k, v in kwargs.items() if k in LOG_KEYS and v is not None}
    logger.info(message, extra=extra)
