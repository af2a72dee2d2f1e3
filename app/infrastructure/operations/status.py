"""Operation status enumeration.

Outcome classes for transport calls (email relays, push providers). The
class decides whether a failed delivery is worth retrying.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        TRANSIENT_ERROR: Retryable error (network, timeout, rate limit, 5xx)
        PERMANENT_ERROR: Non-retryable error (validation, rejected payload)
        UNAUTHORIZED: Credentials missing or rejected by the provider
        NOT_FOUND: Endpoint or resource not found
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
