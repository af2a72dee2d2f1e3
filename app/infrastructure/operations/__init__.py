"""Operation result types and status enums.

Standardized result type for transport operations, its status enum, and
classifiers that map transport exceptions to results.
"""

from infrastructure.operations.classifiers import (
    classify_http_error,
    classify_smtp_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_smtp_error",
]
