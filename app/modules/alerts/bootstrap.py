"""Alert system wiring: dispatcher plus the observers enabled in settings."""

from dataclasses import dataclass
from typing import Optional

from infrastructure.configuration import Settings
from infrastructure.logging import get_module_logger
from integrations.email import build_email_service
from integrations.push import build_push_provider
from integrations.realtime import SessionRegistry
from modules.alerts.dispatcher import AlertDispatcher
from modules.alerts.helpers import AlertHelpers
from modules.alerts.observers import (
    AlertObserver,
    BrowserObserver,
    EmailObserver,
    InAppObserver,
    PushObserver,
)
from modules.alerts.repository import AlertRepository

logger = get_module_logger()


@dataclass
class AlertSystem:
    dispatcher: AlertDispatcher
    helpers: AlertHelpers
    sessions: SessionRegistry

    def close(self) -> None:
        self.dispatcher.close()


def init_alert_system(
    settings: Settings,
    sessions: Optional[SessionRegistry] = None,
    repository: Optional[AlertRepository] = None,
) -> AlertSystem:
    """Build the dispatcher and attach the observers enabled in ``settings.alerts``.

    An observer whose transport cannot be built (unknown provider) is
    skipped and logged; the other observers are still attached.

    Args:
        settings: Application settings.
        sessions: Session registry shared with the realtime API. A new one
            is created when omitted.
        repository: Alert storage, in-memory by default.

    Returns:
        AlertSystem with dispatcher, helpers and session registry.
    """
    alerts = settings.alerts
    sessions = sessions or SessionRegistry()
    dispatcher = AlertDispatcher(
        repository=repository,
        observer_timeout_seconds=alerts.observer_timeout_seconds,
        max_workers=alerts.max_workers,
    )

    factories = [
        (alerts.enable_email, "email", lambda: EmailObserver(build_email_service(settings.email))),
        (alerts.enable_push, "push", lambda: PushObserver(build_push_provider(settings.push))),
        (alerts.enable_in_app, "in_app", lambda: InAppObserver(sessions)),
        (alerts.enable_browser, "browser", lambda: BrowserObserver(sessions)),
    ]
    for enabled, name, factory in factories:
        if not enabled:
            continue
        try:
            observer: AlertObserver = factory()
            dispatcher.attach(observer)
        except ValueError as exc:
            logger.error("alert_observer_setup_failed", observer=name, error=str(exc))

    logger.info(
        "alert_system_initialized",
        observers=[o.id for o in dispatcher.get_observers()],
    )
    return AlertSystem(
        dispatcher=dispatcher,
        helpers=AlertHelpers(dispatcher),
        sessions=sessions,
    )
