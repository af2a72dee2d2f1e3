"""Unit tests for InMemoryAlertRepository."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.alerts.models import AlertDeliveryResult, AlertChannel, AlertStatus, DeliveryAttempt
from modules.alerts.repository import InMemoryAlertRepository


@pytest.fixture
def repository():
    return InMemoryAlertRepository()


def _attempt(number: int) -> DeliveryAttempt:
    now = datetime.now(timezone.utc)
    return DeliveryAttempt(
        attempt=number,
        started_at=now,
        finished_at=now,
        results=(AlertDeliveryResult.delivered(AlertChannel.EMAIL),),
    )


@pytest.mark.unit
class TestInMemoryAlertRepository:
    """Tests for storage, copies and retention."""

    def test_add_and_get(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)

        stored = repository.get(alert.id)

        assert stored == alert
        assert stored is not alert

    def test_add_duplicate_id_raises(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)

        with pytest.raises(ValueError):
            repository.add(alert)

    def test_get_returns_copies(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)

        copy = repository.get(alert.id)
        copy.status = AlertStatus.SENT
        copy.recipients.clear()

        stored = repository.get(alert.id)
        assert stored.status == AlertStatus.PENDING
        assert len(stored.recipients) == 1

    def test_caller_changes_after_add_are_not_stored(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)
        alert.status = AlertStatus.CANCELLED

        assert repository.get(alert.id).status == AlertStatus.PENDING

    def test_save_unknown_alert_raises(self, repository, alert_factory):
        with pytest.raises(KeyError):
            repository.save(alert_factory())

    def test_save_replaces_stored_alert(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)
        alert.status = AlertStatus.FAILED

        repository.save(alert)

        assert repository.get(alert.id).status == AlertStatus.FAILED

    def test_list_keeps_creation_order(self, repository, alert_factory):
        alerts = [alert_factory(title=f"alert {i}") for i in range(3)]
        for alert in alerts:
            repository.add(alert)

        assert [a.id for a in repository.list()] == [a.id for a in alerts]

    def test_attempts(self, repository, alert_factory):
        alert = alert_factory()
        repository.add(alert)

        repository.append_attempt(alert.id, _attempt(1))
        repository.append_attempt(alert.id, _attempt(2))

        assert [a.attempt for a in repository.get_attempts(alert.id)] == [1, 2]
        assert repository.get_attempts("alert-unknown") == []
        with pytest.raises(KeyError):
            repository.append_attempt("alert-unknown", _attempt(1))

    def test_delete_older_than(self, repository, alert_factory):
        now = datetime.now(timezone.utc)
        old = alert_factory(timestamp=now - timedelta(days=40))
        recent = alert_factory(timestamp=now)
        repository.add(old)
        repository.add(recent)
        repository.append_attempt(old.id, _attempt(1))

        removed = repository.delete_older_than(now - timedelta(days=30))

        assert removed == [old.id]
        assert repository.get(old.id) is None
        assert repository.get_attempts(old.id) == []
        assert repository.get(recent.id) is not None

    def test_delete_cutoff_is_exclusive(self, repository, alert_factory):
        now = datetime.now(timezone.utc)
        alert = alert_factory(timestamp=now)
        repository.add(alert)

        assert repository.delete_older_than(now) == []
