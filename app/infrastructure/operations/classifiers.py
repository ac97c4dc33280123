"""Error classifiers for upstream HTTP fetches.

Converts `requests` exceptions and non-2xx responses into standardized
OperationResult objects so every fetch path reports failures the same way.

Key Functions:
- classify_status_code(): HTTP status code -> OperationResult
- classify_requests_error(): requests/transport exception -> OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_requests_error

    try:
        response = session.get(url, timeout=timeout)
    except Exception as exc:
        return classify_requests_error(exc, timeout=timeout)
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def classify_status_code(
    status_code: int,
    message: str,
    retry_after_header: Optional[str] = None,
) -> OperationResult:
    """Classify a non-2xx HTTP status code into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR with retry_after
    - 401/403: -> UNAUTHORIZED
    - 404: -> NOT_FOUND
    - other 4xx: -> PERMANENT_ERROR
    - 5xx and anything unexpected: -> TRANSIENT_ERROR

    Args:
        status_code: HTTP status code of the response
        message: Message to carry on the result
        retry_after_header: Raw Retry-After header value, if any

    Returns:
        OperationResult with an error status and HTTP_<code> error_code
    """
    error_code = f"HTTP_{status_code}"

    if status_code == 429:
        retry_after = 60
        if retry_after_header:
            try:
                retry_after = int(retry_after_header)
            except (ValueError, TypeError):
                pass
        return OperationResult.transient_error(
            message, error_code=error_code, retry_after=retry_after
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, message, error_code=error_code
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND, message, error_code=error_code
        )

    if 400 <= status_code < 500:
        return OperationResult.permanent_error(message, error_code=error_code)

    return OperationResult.transient_error(message, error_code=error_code)


def classify_requests_error(
    exc: Exception, timeout: Optional[float] = None
) -> OperationResult:
    """Classify a transport exception raised while fetching.

    Timeouts and connection failures are transient. Invalid URLs and other
    request construction errors are permanent. Anything else is treated as
    transient since the upstream services are third-party and flaky.

    Args:
        exc: Exception raised by requests (or the code around it)
        timeout: Timeout that was in effect, for the message

    Returns:
        OperationResult with an error status
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Request timeout after {timeout}s", error_code="TIMEOUT"
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"Connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if isinstance(exc, (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema)):
        return OperationResult.permanent_error(
            f"Invalid request: {exc}", error_code="INVALID_REQUEST"
        )

    return OperationResult.transient_error(
        f"Unexpected error: {type(exc).__name__}: {exc}",
        error_code="UNEXPECTED_ERROR",
    )
