"""Unit tests for BrowserObserver."""

import pytest

from integrations.realtime import BrowserPermission
from modules.alerts.models import AlertChannel, AlertMetadata, AlertSeverity
from modules.alerts.observers import BrowserObserver
from modules.alerts.observers.browser import build_browser_notification


@pytest.fixture
def observer(session_registry):
    return BrowserObserver(session_registry)


@pytest.mark.unit
class TestBrowserObserver:
    """Tests for native browser notifications."""

    @pytest.mark.parametrize(
        "supported,permission,expected",
        [
            (True, BrowserPermission.GRANTED, True),
            (True, BrowserPermission.DENIED, False),
            (True, BrowserPermission.DEFAULT, False),
            (False, BrowserPermission.GRANTED, False),
        ],
    )
    def test_can_handle_requires_support_and_permission(
        self, observer, session_registry, alert_factory, supported, permission, expected
    ):
        session_registry.connect(
            "user-1", browser_supported=supported, permission=permission
        )
        alert = alert_factory(channels=[AlertChannel.BROWSER])

        assert observer.can_handle(alert) is expected

    def test_notify_publishes_notification(self, observer, session_registry, alert_factory):
        session_registry.connect("user-1", browser_supported=True, permission="granted")
        alert = alert_factory(
            channels=[AlertChannel.BROWSER],
            severity=AlertSeverity.CRITICAL,
            metadata=AlertMetadata(action_url="/reservas/r-1"),
        )

        result = observer.notify(alert)

        assert result.success
        assert result.metadata == {
            "severity": "critical",
            "has_action": True,
            "require_interaction": True,
        }
        [envelope] = session_registry.drain("user-1")
        assert envelope.event_type == "browser_notification"
        assert envelope.payload["tag"] == alert.id
        assert envelope.payload["click_url"] == "/reservas/r-1"

    def test_notify_without_permission_fails(self, observer, session_registry, alert_factory):
        session_registry.connect("user-1", browser_supported=True, permission="denied")

        result = observer.notify(alert_factory(channels=[AlertChannel.BROWSER]))

        assert not result.success

    @pytest.mark.parametrize(
        "severity,auto_close,interaction",
        [
            (AlertSeverity.CRITICAL, None, True),
            (AlertSeverity.ERROR, 10000, False),
            (AlertSeverity.WARNING, 7000, False),
            (AlertSeverity.INFO, 5000, False),
        ],
    )
    def test_auto_close_by_severity(self, alert_factory, severity, auto_close, interaction):
        notification = build_browser_notification(alert_factory(severity=severity))

        assert notification.auto_close_ms == auto_close
        assert notification.require_interaction is interaction
        assert notification.badge == "/favicon.ico"
