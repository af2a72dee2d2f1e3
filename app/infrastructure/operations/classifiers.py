"""Error classifiers for transport exceptions.

Converts exceptions raised by HTTP providers (requests) and SMTP relays
(smtplib) into OperationResult objects so every backend reports failures
the same way.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc, provider="sendgrid")
"""

import smtplib
import socket
from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER = 60


def _retry_after(response: requests.Response) -> int:
    header_value = response.headers.get("Retry-After")
    if header_value:
        try:
            return int(header_value)
        except (ValueError, TypeError):
            pass
    return DEFAULT_RETRY_AFTER


def _response_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict):
                return str(first.get("message", first))
            return str(first)
        for key in ("message", "error"):
            if key in body:
                return str(body[key])
    return str(body)[:200]


def classify_http_error(exc: Exception, provider: str = "provider") -> OperationResult:
    """Classify a requests exception into an OperationResult.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected → UNAUTHORIZED
    - 404: Not found → NOT_FOUND
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx: Rejected request → PERMANENT_ERROR
    - Timeouts and connection errors → TRANSIENT_ERROR

    Args:
        exc: Exception raised while calling the provider
        provider: Provider name used in messages

    Returns:
        OperationResult with status, message, error_code and retry_after
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"{provider} request timed out", error_code="TIMEOUT"
        )

    response: Optional[requests.Response] = getattr(exc, "response", None)
    if not isinstance(exc, requests.HTTPError) or response is None:
        return OperationResult.transient_error(
            f"{provider} connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    status_code = response.status_code
    detail = _response_detail(response)

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"{provider} rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(response),
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"{provider} rejected credentials ({status_code}): {detail}",
            error_code="UNAUTHORIZED" if status_code == 401 else "FORBIDDEN",
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"{provider} endpoint not found",
            error_code="NOT_FOUND",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{provider} server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"{provider} client error ({status_code}): {detail}",
        error_code="HTTP_ERROR",
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify an SMTP relay exception into an OperationResult.

    Error Mapping:
    - SMTPAuthenticationError → UNAUTHORIZED
    - SMTPRecipientsRefused / SMTPSenderRefused → PERMANENT_ERROR
    - SMTPResponseException with 4xx code → TRANSIENT_ERROR
    - Connection errors, timeouts, other SMTP errors → TRANSIENT_ERROR

    Args:
        exc: Exception raised by smtplib or the socket layer

    Returns:
        OperationResult describing the failure
    """
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            "SMTP authentication failed",
            error_code="UNAUTHORIZED",
        )

    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        refused = ", ".join(sorted(exc.recipients))
        return OperationResult.permanent_error(
            f"SMTP recipients refused: {refused}",
            error_code="RECIPIENTS_REFUSED",
        )

    if isinstance(exc, smtplib.SMTPSenderRefused):
        return OperationResult.permanent_error(
            f"SMTP sender refused: {exc.sender}",
            error_code="SENDER_REFUSED",
        )

    if isinstance(exc, smtplib.SMTPResponseException):
        if 400 <= exc.smtp_code < 500:
            return OperationResult.transient_error(
                f"SMTP temporary failure ({exc.smtp_code})",
                error_code="SMTP_TEMPORARY",
            )
        return OperationResult.permanent_error(
            f"SMTP error ({exc.smtp_code}): {exc.smtp_error!r}",
            error_code="SMTP_ERROR",
        )

    if isinstance(exc, (smtplib.SMTPException, socket.timeout, OSError)):
        return OperationResult.transient_error(
            f"SMTP connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.permanent_error(
        f"SMTP error: {type(exc).__name__}: {exc}",
        error_code="UNKNOWN_ERROR",
    )
