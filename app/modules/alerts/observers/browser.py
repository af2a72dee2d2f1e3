"""Browser observer: native notifications for sessions with granted permission."""

from infrastructure.logging import get_module_logger
from integrations.realtime import BrowserNotificationMessage, SessionRegistry
from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertSeverity,
)
from modules.alerts.observers.base import AlertObserver

logger = get_module_logger()

SEVERITY_ICONS = {
    AlertSeverity.CRITICAL: "/icons/alert-error.png",
    AlertSeverity.ERROR: "/icons/alert-error.png",
    AlertSeverity.WARNING: "/icons/alert-warning.png",
    AlertSeverity.SUCCESS: "/icons/alert-success.png",
    AlertSeverity.INFO: "/icons/alert-info.png",
}

# Critical notifications never auto-close.
AUTO_CLOSE_MS = {
    AlertSeverity.CRITICAL: None,
    AlertSeverity.ERROR: 10000,
    AlertSeverity.WARNING: 7000,
}
DEFAULT_AUTO_CLOSE_MS = 5000


def build_browser_notification(alert: Alert) -> BrowserNotificationMessage:
    return BrowserNotificationMessage(
        alert_id=alert.id,
        title=alert.title,
        body=alert.message,
        icon=SEVERITY_ICONS[alert.severity],
        badge="/favicon.ico",
        tag=alert.id,
        require_interaction=alert.severity == AlertSeverity.CRITICAL,
        auto_close_ms=AUTO_CLOSE_MS.get(alert.severity, DEFAULT_AUTO_CLOSE_MS),
        click_url=alert.metadata.action_url,
        data={"alert_id": alert.id, "type": alert.type.value},
    )


class BrowserObserver(AlertObserver):
    id = "browser-observer"
    channels = (AlertChannel.BROWSER,)

    def __init__(self, sessions: SessionRegistry):
        self.sessions = sessions

    def _targets(self, alert: Alert) -> list[str]:
        return [
            r.user_id
            for r in self.eligible_recipients(alert, AlertChannel.BROWSER)
            if self.sessions.can_show_browser_notifications(r.user_id)
        ]

    def can_handle(self, alert: Alert) -> bool:
        return AlertChannel.BROWSER in alert.channels and bool(self._targets(alert))

    def notify(self, alert: Alert) -> AlertDeliveryResult:
        notification = build_browser_notification(alert)
        payload = notification.model_dump(mode="json")
        shown = sum(
            1 for user_id in self._targets(alert)
            if self.sessions.publish(user_id, "browser_notification", payload)
        )
        if shown == 0:
            return AlertDeliveryResult.failed(
                AlertChannel.BROWSER,
                "Browser notifications not supported or permission not granted",
            )

        logger.info("browser_notification_published", alert_id=alert.id, shown=shown)
        return AlertDeliveryResult.delivered(
            AlertChannel.BROWSER,
            metadata={
                "severity": alert.severity.value,
                "has_action": notification.click_url is not None,
                "require_interaction": notification.require_interaction,
            },
        )
