"""Push observer: one notification to every recipient device token."""

from infrastructure.logging import get_module_logger
from integrations.push import PushNotification, PushProvider
from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertSeverity,
)
from modules.alerts.observers.base import AlertObserver, failure_metadata

logger = get_module_logger()

SEVERITY_SOUNDS = {
    AlertSeverity.CRITICAL: "alert.wav",
    AlertSeverity.ERROR: "alert.wav",
    AlertSeverity.WARNING: "warning.wav",
}


def sound_for(severity: AlertSeverity) -> str:
    return SEVERITY_SOUNDS.get(severity, "default")


class PushObserver(AlertObserver):
    id = "push-observer"
    channels = (AlertChannel.PUSH,)

    def __init__(self, provider: PushProvider):
        self.provider = provider

    def can_handle(self, alert: Alert) -> bool:
        if AlertChannel.PUSH not in alert.channels:
            return False
        return any(
            r.push_token for r in self.eligible_recipients(alert, AlertChannel.PUSH)
        )

    def build_notification(self, alert: Alert, tokens: list[str]) -> PushNotification:
        data = {
            **alert.metadata.model_dump(mode="json", exclude_none=True),
            "alert_id": alert.id,
            "type": alert.type.value,
            "severity": alert.severity.value,
        }
        return PushNotification(
            tokens=tokens,
            title=alert.title,
            body=alert.message,
            data=data,
            badge=1,
            sound=sound_for(alert.severity),
        )

    def notify(self, alert: Alert) -> AlertDeliveryResult:
        tokens = [
            r.push_token
            for r in self.eligible_recipients(alert, AlertChannel.PUSH)
            if r.push_token
        ]
        if not tokens:
            return AlertDeliveryResult.failed(
                AlertChannel.PUSH, "No valid push recipients found"
            )

        try:
            result = self.provider.send(self.build_notification(alert, tokens))
        except Exception as exc:
            logger.exception("push_observer_failed", alert_id=alert.id, error=str(exc))
            return AlertDeliveryResult.failed(AlertChannel.PUSH, str(exc))

        if not result.is_success:
            logger.warning(
                "push_delivery_failed",
                alert_id=alert.id,
                provider=self.provider.name,
                error=result.message,
            )
            return AlertDeliveryResult.failed(
                AlertChannel.PUSH,
                result.message or "Failed to send push notification",
                metadata=failure_metadata(result, provider=self.provider.name),
            )

        return AlertDeliveryResult.delivered(
            AlertChannel.PUSH,
            metadata={
                "message_id": (result.data or {}).get("message_id"),
                "recipient_count": len(tokens),
                "provider": self.provider.name,
            },
        )
