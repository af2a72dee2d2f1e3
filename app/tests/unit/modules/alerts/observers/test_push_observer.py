"""Unit tests for PushObserver."""

from unittest.mock import MagicMock

import pytest

from infrastructure.operations import OperationResult
from integrations.push import PushProvider
from modules.alerts.models import AlertChannel, AlertMetadata, AlertSeverity
from modules.alerts.observers import PushObserver
from modules.alerts.observers.push import sound_for


@pytest.fixture
def provider():
    mock = MagicMock(spec=PushProvider)
    mock.name = "firebase"
    mock.send.return_value = OperationResult.success(data={"message_id": "123"})
    return mock


@pytest.fixture
def observer(provider):
    return PushObserver(provider)


@pytest.mark.unit
class TestPushObserver:
    """Tests for push delivery."""

    def test_can_handle_requires_token(self, observer, alert_factory, recipient_factory):
        with_token = alert_factory(
            channels=[AlertChannel.PUSH], recipients=[recipient_factory(push_token="t1")]
        )
        without_token = alert_factory(channels=[AlertChannel.PUSH])

        assert observer.can_handle(with_token)
        assert not observer.can_handle(without_token)

    def test_notify_sends_to_all_tokens(
        self, observer, provider, alert_factory, recipient_factory
    ):
        alert = alert_factory(
            severity=AlertSeverity.WARNING,
            channels=[AlertChannel.PUSH],
            recipients=[
                recipient_factory(user_id="u1", push_token="t1"),
                recipient_factory(user_id="u2"),
                recipient_factory(user_id="u3", push_token="t3"),
            ],
            metadata=AlertMetadata(reservation_id="r-1"),
        )

        result = observer.notify(alert)

        assert result.success
        assert result.metadata == {
            "message_id": "123",
            "recipient_count": 2,
            "provider": "firebase",
        }
        notification = provider.send.call_args[0][0]
        assert notification.tokens == ["t1", "t3"]
        assert notification.badge == 1
        assert notification.sound == "warning.wav"
        assert notification.data["alert_id"] == alert.id
        assert notification.data["type"] == "reservation_confirmed"
        assert notification.data["severity"] == "warning"
        assert notification.data["reservation_id"] == "r-1"

    def test_no_tokens(self, observer, provider, alert_factory):
        result = observer.notify(alert_factory(channels=[AlertChannel.PUSH]))

        assert not result.success
        assert result.error == "No valid push recipients found"
        provider.send.assert_not_called()

    def test_provider_failure(self, observer, provider, alert_factory, recipient_factory):
        provider.send.return_value = OperationResult.permanent_error(
            "firebase delivered to no device", error_code="PUSH_REJECTED"
        )
        alert = alert_factory(
            channels=[AlertChannel.PUSH], recipients=[recipient_factory(push_token="t1")]
        )

        result = observer.notify(alert)

        assert not result.success
        assert result.metadata == {
            "provider": "firebase",
            "error_code": "PUSH_REJECTED",
            "retryable": False,
        }

    def test_rate_limited_provider_reports_retry_after(
        self, observer, provider, alert_factory, recipient_factory
    ):
        provider.send.return_value = OperationResult.transient_error(
            "onesignal rate limited", error_code="RATE_LIMITED", retry_after=120
        )
        alert = alert_factory(
            channels=[AlertChannel.PUSH], recipients=[recipient_factory(push_token="t1")]
        )

        result = observer.notify(alert)

        assert result.metadata["retryable"] is True
        assert result.metadata["retry_after"] == 120

    def test_metadata_cannot_override_alert_identity(
        self, observer, provider, alert_factory, recipient_factory
    ):
        alert = alert_factory(
            channels=[AlertChannel.PUSH],
            recipients=[recipient_factory(push_token="t1")],
            metadata=AlertMetadata(
                alert_id="spoofed", type="other", severity="info", club_id="c-9"
            ),
        )

        observer.notify(alert)

        data = provider.send.call_args[0][0].data
        assert data["alert_id"] == alert.id
        assert data["type"] == alert.type.value
        assert data["severity"] == alert.severity.value
        assert data["club_id"] == "c-9"

    @pytest.mark.parametrize(
        "severity,sound",
        [
            (AlertSeverity.CRITICAL, "alert.wav"),
            (AlertSeverity.ERROR, "alert.wav"),
            (AlertSeverity.WARNING, "warning.wav"),
            (AlertSeverity.INFO, "default"),
            (AlertSeverity.SUCCESS, "default"),
        ],
    )
    def test_sound_for_severity(self, severity, sound):
        assert sound_for(severity) == sound
