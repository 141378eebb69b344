"""
Error taxonomy for Craiyon requests.
Converts httpx outcomes into RequestError subclasses and classifies them for the retry runner.
"""
from enum import Enum
from typing import Any

import httpx

HTTP_TOO_MANY_REQUESTS = 429
# Wait before retrying after a 429
RATE_LIMIT_BACKOFF_SECONDS = 10.0


class RequestError(Exception):
    """Raised when a request to the backend fails; status_code is None for transport failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.detail = detail or {}


class TransportError(RequestError):
    """Network-level failure: connection refused, timeout, broken stream."""


class BackendError(RequestError):
    """Backend answered with a non-success status."""


class RateLimitedError(BackendError):
    """Backend answered 429 Too Many Requests."""


class MalformedResponseError(RequestError):
    """Response body does not have the expected shape."""


class FailureType(str, Enum):
    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"  # 429
    BACKEND = "backend"  # any other non-2xx
    MALFORMED_RESPONSE = "malformed_response"


def classify_failure(error: RequestError) -> tuple[FailureType, bool]:
    """Return (failure_type, retry_allowed) for a request error."""
    if isinstance(error, MalformedResponseError):
        return (FailureType.MALFORMED_RESPONSE, False)
    if isinstance(error, RateLimitedError):
        return (FailureType.RATE_LIMITED, True)
    if isinstance(error, BackendError):
        return (FailureType.BACKEND, True)
    return (FailureType.TRANSPORT, True)


def error_from_response(response: httpx.Response) -> BackendError:
    """Build the error for a non-success response."""
    status = response.status_code
    url = str(response.request.url)
    detail: dict[str, Any] = {"http_status": status}
    retry_after = response.headers.get("retry-after")
    if retry_after:
        detail["retry_after"] = retry_after
    if status == HTTP_TOO_MANY_REQUESTS:
        return RateLimitedError(
            f"Craiyon rate limit hit: {status} for {url}",
            status_code=status,
            url=url,
            detail=detail,
        )
    return BackendError(
        f"Craiyon request failed with status {status} for {url}",
        status_code=status,
        url=url,
        detail=detail,
    )


def error_from_transport(exc: httpx.RequestError, url: str) -> TransportError:
    """Wrap an httpx transport exception; the original stays available as __cause__."""
    return TransportError(
        f"Craiyon request to {url} failed: {type(exc).__name__}: {exc}",
        url=url,
        detail={"error": type(exc).__name__},
    )


def raise_for_response(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise error_from_response(response) from e
