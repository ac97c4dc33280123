"""Operation status enumeration.

Status codes used to classify the outcome of upstream fetches so callers can
tell a transient transport problem from a permanent one without inspecting
exceptions.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (timeout, connection refused, 5xx)
        PERMANENT_ERROR: Non-retryable error (bad request, malformed payload)
        UNAUTHORIZED: Upstream rejected the request (401/403)
        NOT_FOUND: Upstream resource does not exist (404)
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
