"""Email service: validation, sender defaults and batch delivery.

Usage Example:
    from integrations.email import build_email_service, EmailRequest

    service = build_email_service(settings.email)
    result = service.send(
        EmailRequest(to=["player@example.com"], subject="Hola", text="...")
    )
    if result.is_success:
        message_id = result.data["message_id"]
"""

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from infrastructure.configuration import EmailSettings
from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from integrations.email.base import EmailBackend, EmailRequest
from integrations.email.resend import ResendBackend
from integrations.email.sendgrid import SendGridBackend
from integrations.email.smtp import SmtpBackend

logger = get_module_logger()

_TEMPLATE_VARIABLE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def render_template(template: str, variables: Dict[str, object]) -> str:
    """Replace ``{{name}}`` placeholders; unknown names are left untouched."""

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        return str(variables[key]) if key in variables else match.group(0)

    return _TEMPLATE_VARIABLE.sub(_replace, template)


class EmailService:
    """Validates email requests and hands them to one backend.

    Attributes:
        backend: EmailBackend doing the actual delivery
        from_address: Default sender address
        from_name: Default sender display name
        max_workers: Concurrency used by send_batch
    """

    def __init__(
        self,
        backend: EmailBackend,
        from_address: str,
        from_name: Optional[str] = None,
        max_workers: int = 4,
    ):
        self.backend = backend
        self.from_address = from_address
        self.from_name = from_name
        self.max_workers = max_workers

    @property
    def provider(self) -> str:
        return self.backend.name

    def validate(self, request: EmailRequest) -> Optional[OperationResult]:
        """Return a VALIDATION_ERROR result, or None when the request is sendable."""
        if not any(address.strip() for address in request.to):
            error = "Recipient email is required"
        elif not request.subject.strip():
            error = "Subject is required"
        elif not (request.text or request.html):
            error = "Email body (text or html) is required"
        else:
            return None
        return OperationResult.permanent_error(error, error_code="VALIDATION_ERROR")

    def send(self, request: EmailRequest) -> OperationResult:
        """Validate, apply sender defaults and deliver one email.

        Never raises: backend exceptions become a PERMANENT_ERROR result.
        """
        invalid = self.validate(request)
        if invalid is not None:
            logger.warning(
                "email_validation_failed",
                provider=self.provider,
                error=invalid.message,
            )
            return invalid

        request = request.model_copy(
            update={
                "to": [address for address in request.to if address.strip()],
                "from_address": request.from_address or self.from_address,
                "from_name": request.from_name or self.from_name,
            }
        )

        try:
            result = self.backend.send(request)
        except Exception as exc:
            logger.exception(
                "email_backend_exception", provider=self.provider, error=str(exc)
            )
            return OperationResult.permanent_error(
                f"{self.provider} backend raised {type(exc).__name__}: {exc}",
                error_code="BACKEND_EXCEPTION",
            )

        if result.is_success:
            logger.info(
                "email_sent",
                provider=self.provider,
                recipient_count=len(request.to),
                message_id=(result.data or {}).get("message_id"),
            )
        else:
            logger.error(
                "email_send_failed",
                provider=self.provider,
                error=result.message,
                error_code=result.error_code,
            )
        return result

    def send_batch(self, batch: List[EmailRequest]) -> List[OperationResult]:
        """Send several emails concurrently.

        Results are independent and in the same order as ``batch``.
        """
        if not batch:
            return []
        workers = min(self.max_workers, len(batch))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(self.send, batch))

        logger.info(
            "email_batch_sent",
            provider=self.provider,
            total=len(results),
            success_count=sum(1 for r in results if r.is_success),
        )
        return results

    def send_with_template(
        self,
        request: EmailRequest,
        template_html: str,
        variables: Dict[str, object],
    ) -> OperationResult:
        """Render ``{{var}}`` placeholders into the HTML body and subject, then send."""
        rendered = request.model_copy(
            update={
                "html": render_template(template_html, variables),
                "subject": render_template(request.subject, variables),
            }
        )
        return self.send(rendered)


def build_email_backend(settings: EmailSettings) -> EmailBackend:
    provider = settings.EMAIL_PROVIDER.lower()
    if provider == "smtp":
        return SmtpBackend(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            secure=settings.SMTP_SECURE,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )
    if provider == "sendgrid":
        return SendGridBackend(
            api_key=settings.EMAIL_API_KEY, timeout=settings.EMAIL_TIMEOUT_SECONDS
        )
    if provider == "resend":
        return ResendBackend(
            api_key=settings.EMAIL_API_KEY, timeout=settings.EMAIL_TIMEOUT_SECONDS
        )
    raise ValueError(f"Unsupported email provider: {settings.EMAIL_PROVIDER}")


def build_email_service(settings: EmailSettings) -> EmailService:
    """Create an EmailService for the configured provider.

    Raises:
        ValueError: If EMAIL_PROVIDER is not smtp, sendgrid or resend.
    """
    service = EmailService(
        backend=build_email_backend(settings),
        from_address=settings.EMAIL_FROM_ADDRESS,
        from_name=settings.EMAIL_FROM_NAME,
    )
    logger.info(
        "initialized_email_service",
        provider=service.provider,
        sender=settings.EMAIL_FROM_ADDRESS,
    )
    return service
