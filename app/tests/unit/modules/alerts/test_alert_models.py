"""Unit tests for the alert data model.

Tests cover:
- Alert ids, defaults and UTC handling
- Recipient validation and blank values
- Preference checks (channels, enabled types, quiet hours)
- Metadata template variables
"""

from datetime import datetime, time, timedelta, timezone

import pytest
from pydantic import ValidationError

from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertMetadata,
    AlertPreferences,
    AlertRecipient,
    AlertStatus,
    AlertType,
    DeliveryAttempt,
    QuietHours,
    ensure_aware,
)


@pytest.mark.unit
class TestAlert:
    """Tests for the Alert model."""

    def test_new_alert_defaults(self, alert_factory):
        alert = alert_factory()

        assert alert.id.startswith("alert-")
        assert alert.status == AlertStatus.PENDING
        assert alert.retry_count == 0
        assert alert.sent_at is None
        assert alert.timestamp.tzinfo is not None

    def test_alert_ids_are_unique(self, alert_factory):
        ids = {alert_factory().id for _ in range(50)}
        assert len(ids) == 50

    def test_alert_id_is_immutable(self, alert_factory):
        alert = alert_factory()
        with pytest.raises(ValidationError):
            alert.id = "alert-other"

    def test_naive_datetimes_are_treated_as_utc(self, alert_factory):
        alert = alert_factory(scheduled_for=datetime(2030, 1, 1, 12, 0))
        assert alert.scheduled_for == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_is_due(self, alert_factory):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert alert_factory().is_due(now)
        assert alert_factory(scheduled_for=now).is_due(now)
        assert not alert_factory(scheduled_for=now + timedelta(seconds=1)).is_due(now)

    def test_unknown_channel_is_rejected(self, alert_factory):
        with pytest.raises(ValidationError):
            alert_factory(channels=["fax"])


@pytest.mark.unit
class TestAlertRecipient:
    """Tests for recipient validation and preference checks."""

    def test_valid_email_is_accepted(self):
        recipient = AlertRecipient(user_id="u1", email="player@example.com")
        assert recipient.email == "player@example.com"

    def test_invalid_email_is_rejected(self):
        with pytest.raises(ValidationError):
            AlertRecipient(user_id="u1", email="not-an-email")

    def test_blank_contact_fields_become_none(self):
        recipient = AlertRecipient(user_id="u1", email="  ", push_token="")
        assert recipient.email is None
        assert recipient.push_token is None

    def test_without_preferences_everything_is_accepted(self, recipient_factory):
        recipient = recipient_factory()
        for channel in AlertChannel:
            assert recipient.accepts(channel, AlertType.CUSTOM)

    def test_channel_not_in_preferences_is_refused(self, recipient_factory):
        recipient = recipient_factory(channels=[AlertChannel.EMAIL])

        assert recipient.accepts(AlertChannel.EMAIL, AlertType.CUSTOM)
        assert not recipient.accepts(AlertChannel.PUSH, AlertType.CUSTOM)

    def test_enabled_types_filter(self, recipient_factory):
        recipient = recipient_factory(enabled_types=[AlertType.PAYMENT_CONFIRMED])

        assert recipient.accepts(AlertChannel.EMAIL, AlertType.PAYMENT_CONFIRMED)
        assert not recipient.accepts(AlertChannel.EMAIL, AlertType.SLOT_RELEASED)

    def test_quiet_hours_hold_back_interruptive_channels_only(self):
        recipient = AlertRecipient(
            user_id="u1",
            preferences=AlertPreferences(
                channels=list(AlertChannel),
                quiet_hours=QuietHours(start="22:00", end="07:00"),
            ),
        )
        night = datetime(2030, 1, 1, 23, 30, tzinfo=timezone.utc)
        day = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

        assert not recipient.accepts(AlertChannel.PUSH, AlertType.CUSTOM, at=night)
        assert not recipient.accepts(AlertChannel.BROWSER, AlertType.CUSTOM, at=night)
        assert recipient.accepts(AlertChannel.EMAIL, AlertType.CUSTOM, at=night)
        assert recipient.accepts(AlertChannel.PUSH, AlertType.CUSTOM, at=day)


@pytest.mark.unit
class TestQuietHours:
    """Tests for the QuietHours window."""

    def test_window_wrapping_midnight(self):
        window = QuietHours(start="22:00", end="07:00")

        assert window.contains(time(23, 0))
        assert window.contains(time(6, 59))
        assert not window.contains(time(7, 0))
        assert not window.contains(time(12, 0))

    def test_same_day_window(self):
        window = QuietHours(start="13:00", end="15:00")

        assert window.contains(time(13, 0))
        assert not window.contains(time(15, 0))

    def test_empty_window(self):
        assert not QuietHours(start="10:00", end="10:00").contains(time(10, 0))

    @pytest.mark.parametrize("value", ["7:00", "24:00", "12:60", "noon"])
    def test_invalid_format_is_rejected(self, value):
        with pytest.raises(ValidationError):
            QuietHours(start=value, end="07:00")


@pytest.mark.unit
class TestAlertMetadata:
    """Tests for metadata template variables."""

    def test_template_variables_skip_missing_and_empty_values(self):
        metadata = AlertMetadata(court_name="Cancha 1", reason="", date="2030-05-01")

        variables = metadata.template_variables()

        assert variables == {"court_name": "Cancha 1", "date": "2030-05-01"}

    def test_whole_prices_render_without_decimals(self):
        assert AlertMetadata(price=1500.0).template_variables()["price"] == "1500"
        assert AlertMetadata(price=99.5).template_variables()["price"] == "99.5"

    def test_extra_keys_are_kept(self):
        metadata = AlertMetadata(team_name="Los Pumas")
        assert metadata.template_variables()["team_name"] == "Los Pumas"


@pytest.mark.unit
class TestDeliveryModels:
    """Tests for delivery results and attempts."""

    def test_delivered_result(self):
        result = AlertDeliveryResult.delivered(AlertChannel.EMAIL, {"message_id": "m1"})

        assert result.success is True
        assert result.sent_at is not None
        assert result.error is None
        assert result.metadata == {"message_id": "m1"}

    def test_failed_result(self):
        result = AlertDeliveryResult.failed(AlertChannel.PUSH, "boom")

        assert result.success is False
        assert result.sent_at is None
        assert result.error == "boom"

    def test_results_are_frozen(self):
        result = AlertDeliveryResult.failed(AlertChannel.PUSH, "boom")
        with pytest.raises(ValidationError):
            result.success = True

    def test_attempt_succeeded_when_any_result_succeeded(self):
        now = datetime.now(timezone.utc)
        attempt = DeliveryAttempt(
            attempt=1,
            started_at=now,
            finished_at=now,
            results=(
                AlertDeliveryResult.failed(AlertChannel.PUSH, "boom"),
                AlertDeliveryResult.delivered(AlertChannel.EMAIL),
            ),
        )
        assert attempt.succeeded
        assert not DeliveryAttempt(attempt=2, started_at=now, finished_at=now).succeeded


@pytest.mark.unit
def test_ensure_aware_keeps_aware_values():
    value = datetime(2030, 1, 1, tzinfo=timezone(timedelta(hours=-3)))
    assert ensure_aware(value) is value
    assert ensure_aware(None) is None
