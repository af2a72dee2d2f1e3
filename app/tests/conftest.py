"""Shared fixtures for alert dispatch tests.

Factories build real models with sensible defaults; stub observers stand
in for transports so dispatcher tests never touch the network.
"""

import threading
from typing import Callable, List, Optional, Sequence

import pytest

from infrastructure.configuration import (
    AlertsSettings,
    EmailSettings,
    PushSettings,
    Settings,
)
from integrations.realtime import SessionRegistry
from modules.alerts import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertDispatcher,
    AlertMetadata,
    AlertPreferences,
    AlertRecipient,
    AlertSeverity,
    AlertType,
)
from modules.alerts.observers.base import AlertObserver, ObserverResult


class StubObserver(AlertObserver):
    """Observer whose behaviour is driven by the test.

    ``behaviour`` receives the alert and returns what ``notify`` should
    return (or raises). The default succeeds on every owned channel.
    """

    def __init__(
        self,
        observer_id: str,
        channels: Sequence[AlertChannel],
        behaviour: Optional[Callable[[Alert], ObserverResult]] = None,
        handles: bool = True,
    ):
        self.id = observer_id
        self.channels = tuple(channels)
        self.behaviour = behaviour
        self.handles = handles
        self.calls: List[Alert] = []
        self._calls_lock = threading.Lock()

    def can_handle(self, alert: Alert) -> bool:
        return self.handles and self.requested(alert)

    def notify(self, alert: Alert) -> ObserverResult:
        with self._calls_lock:
            self.calls.append(alert)
        if self.behaviour is not None:
            return self.behaviour(alert)
        return [
            AlertDeliveryResult.delivered(channel)
            for channel in self.channels
            if channel in alert.channels
        ]


@pytest.fixture
def recipient_factory():
    """Factory for AlertRecipient instances.

    Example:
        recipient = recipient_factory(user_id="u2", push_token="tok-2")
        muted = recipient_factory(channels=[AlertChannel.EMAIL])
    """

    def _factory(
        user_id: str = "user-1",
        email: Optional[str] = "player@example.com",
        push_token: Optional[str] = None,
        channels: Optional[List[AlertChannel]] = None,
        enabled_types: Optional[List[AlertType]] = None,
    ) -> AlertRecipient:
        preferences = None
        if channels is not None or enabled_types is not None:
            preferences = AlertPreferences(
                channels=channels if channels is not None else list(AlertChannel),
                enabled_types=enabled_types or [],
            )
        return AlertRecipient(
            user_id=user_id,
            email=email,
            push_token=push_token,
            preferences=preferences,
        )

    return _factory


@pytest.fixture
def alert_factory(recipient_factory):
    """Factory for Alert instances (not stored in any dispatcher)."""

    def _factory(
        type: AlertType = AlertType.RESERVATION_CONFIRMED,
        severity: AlertSeverity = AlertSeverity.SUCCESS,
        title: str = "Reserva Confirmada",
        message: str = "Tu reserva ha sido confirmada.",
        recipients: Optional[List[AlertRecipient]] = None,
        channels: Optional[List[AlertChannel]] = None,
        metadata: Optional[AlertMetadata] = None,
        **fields,
    ) -> Alert:
        return Alert(
            type=type,
            severity=severity,
            title=title,
            message=message,
            recipients=recipients if recipients is not None else [recipient_factory()],
            channels=channels if channels is not None else [AlertChannel.EMAIL],
            metadata=metadata or AlertMetadata(),
            **fields,
        )

    return _factory


@pytest.fixture
def observer_factory():
    """Factory for StubObserver instances.

    Example:
        email = observer_factory("email-observer", [AlertChannel.EMAIL])
        broken = observer_factory(
            "push-observer", [AlertChannel.PUSH], behaviour=raise_error
        )
    """

    def _factory(
        observer_id: str = "stub-observer",
        channels: Sequence[AlertChannel] = (AlertChannel.EMAIL,),
        behaviour: Optional[Callable[[Alert], ObserverResult]] = None,
        handles: bool = True,
    ) -> StubObserver:
        return StubObserver(observer_id, channels, behaviour, handles)

    return _factory


@pytest.fixture
def dispatcher():
    """Dispatcher with a short observer timeout, closed after the test."""
    instance = AlertDispatcher(observer_timeout_seconds=2, max_workers=4)
    yield instance
    instance.close()


@pytest.fixture
def session_registry():
    return SessionRegistry()


@pytest.fixture
def settings_factory():
    """Factory for Settings built from explicit values, ignoring the environment.

    Example:
        settings = settings_factory(alerts={"ALERTS_ENABLE_PUSH": False})
    """

    def _factory(
        email: Optional[dict] = None,
        push: Optional[dict] = None,
        alerts: Optional[dict] = None,
        **base,
    ) -> Settings:
        return Settings(
            email=EmailSettings(_env_file=None, **(email or {})),
            push=PushSettings(_env_file=None, **(push or {})),
            alerts=AlertsSettings(_env_file=None, **(alerts or {})),
            _env_file=None,
            **base,
        )

    return _factory
