"""Operation result types and status enums.

Standardized result types for upstream fetches: status enum, result
dataclass and the classifiers that map transport failures onto them.
"""

from infrastructure.operations.classifiers import (
    classify_requests_error,
    classify_status_code,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_requests_error",
    "classify_status_code",
]
