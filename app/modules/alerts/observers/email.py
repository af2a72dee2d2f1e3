"""Email observer: renders a template per alert type and sends one batched email."""

import html
from typing import Dict, Optional

from infrastructure.logging import get_module_logger
from integrations.email import EmailRequest, EmailService
from modules.alerts.models import Alert, AlertChannel, AlertDeliveryResult, AlertType
from modules.alerts.observers.base import AlertObserver, failure_metadata
from modules.alerts.templates import EmailTemplate, get_template, render

logger = get_module_logger()


class EmailObserver(AlertObserver):
    """Delivers alerts by email through an EmailService.

    Templates can be overridden per instance with ``set_template``; the
    module-level defaults are never modified.
    """

    id = "email-observer"
    channels = (AlertChannel.EMAIL,)

    def __init__(self, email_service: EmailService):
        self.email_service = email_service
        self._templates: Dict[AlertType, EmailTemplate] = {}

    def can_handle(self, alert: Alert) -> bool:
        if AlertChannel.EMAIL not in alert.channels:
            return False
        return any(r.email for r in self.eligible_recipients(alert, AlertChannel.EMAIL))

    def set_template(self, alert_type: AlertType, subject: str, html_body: str) -> None:
        self._templates[alert_type] = EmailTemplate(subject=subject, html=html_body)
        logger.info("email_template_overridden", alert_type=alert_type.value)

    def template_for(self, alert_type: AlertType) -> EmailTemplate:
        return get_template(alert_type, self._templates)

    def build_request(self, alert: Alert) -> Optional[EmailRequest]:
        addresses = [
            str(r.email)
            for r in self.eligible_recipients(alert, AlertChannel.EMAIL)
            if r.email
        ]
        if not addresses:
            return None

        variables = {"title": alert.title, "message": alert.message}
        variables.update(alert.metadata.template_variables())
        escaped = {key: html.escape(value) for key, value in variables.items()}

        template = self.template_for(alert.type)
        return EmailRequest(
            to=addresses,
            subject=render(template.subject, variables),
            html=render(template.html, escaped),
            text=alert.message,
        )

    def notify(self, alert: Alert) -> AlertDeliveryResult:
        try:
            request = self.build_request(alert)
            if request is None:
                return AlertDeliveryResult.failed(
                    AlertChannel.EMAIL, "No valid email recipients found"
                )

            result = self.email_service.send(request)
        except Exception as exc:
            logger.exception("email_observer_failed", alert_id=alert.id, error=str(exc))
            return AlertDeliveryResult.failed(AlertChannel.EMAIL, str(exc))

        if not result.is_success:
            return AlertDeliveryResult.failed(
                AlertChannel.EMAIL,
                result.message or "Failed to send email",
                metadata=failure_metadata(result),
            )

        return AlertDeliveryResult.delivered(
            AlertChannel.EMAIL,
            metadata={
                "message_id": (result.data or {}).get("message_id"),
                "recipient_count": len(request.to),
                "provider": self.email_service.provider,
            },
        )
