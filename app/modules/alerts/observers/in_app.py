"""In-app observer: publishes toasts to connected user sessions."""

from infrastructure.logging import get_module_logger
from integrations.realtime import SessionRegistry, ToastAction, ToastMessage
from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertSeverity,
)
from modules.alerts.observers.base import AlertObserver

logger = get_module_logger()

TOAST_STYLES = {
    AlertSeverity.SUCCESS: "success",
    AlertSeverity.ERROR: "error",
    AlertSeverity.CRITICAL: "error",
    AlertSeverity.WARNING: "warning",
    AlertSeverity.INFO: "info",
}

TOAST_DURATIONS_MS = {
    AlertSeverity.CRITICAL: 10000,
    AlertSeverity.ERROR: 7000,
    AlertSeverity.WARNING: 5000,
}
DEFAULT_TOAST_DURATION_MS = 4000


def build_toast(alert: Alert) -> ToastMessage:
    action_url = alert.metadata.action_url
    return ToastMessage(
        alert_id=alert.id,
        title=alert.title,
        message=alert.message,
        style=TOAST_STYLES[alert.severity],
        duration_ms=TOAST_DURATIONS_MS.get(alert.severity, DEFAULT_TOAST_DURATION_MS),
        action=ToastAction(label="Ver", url=action_url) if action_url else None,
    )


class InAppObserver(AlertObserver):
    id = "in-app-observer"
    channels = (AlertChannel.IN_APP,)

    def __init__(self, sessions: SessionRegistry):
        self.sessions = sessions

    def _targets(self, alert: Alert) -> list[str]:
        return [
            r.user_id
            for r in self.eligible_recipients(alert, AlertChannel.IN_APP)
            if self.sessions.is_connected(r.user_id)
        ]

    def can_handle(self, alert: Alert) -> bool:
        return AlertChannel.IN_APP in alert.channels and bool(self._targets(alert))

    def notify(self, alert: Alert) -> AlertDeliveryResult:
        toast = build_toast(alert)
        payload = toast.model_dump(mode="json")
        displayed = sum(
            1 for user_id in self._targets(alert)
            if self.sessions.publish(user_id, "toast", payload)
        )
        if displayed == 0:
            return AlertDeliveryResult.failed(
                AlertChannel.IN_APP, "No connected in-app session"
            )

        logger.info("in_app_toast_published", alert_id=alert.id, displayed=displayed)
        return AlertDeliveryResult.delivered(
            AlertChannel.IN_APP,
            metadata={
                "severity": alert.severity.value,
                "has_action": toast.action is not None,
                "displayed_count": displayed,
            },
        )
