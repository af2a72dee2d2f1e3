"""Alert dispatch module.

Turns domain events (reservations, payments, released slots, challenges)
into typed alerts and delivers them over email, push, in-app toasts and
browser notifications through pluggable observers.

Example:
    from modules.alerts import init_alert_system

    system = init_alert_system(get_settings())
    system.helpers.payment_confirmed(
        user_id="u1",
        email="u1@example.com",
        amount=1500,
        reservation_id="r-42",
        payment_method="tarjeta",
    )
"""

from modules.alerts.bootstrap import AlertSystem, init_alert_system
from modules.alerts.dispatcher import AlertDispatcher
from modules.alerts.errors import (
    AlertError,
    AlreadySentError,
    DuplicateObserverError,
    InvalidStateError,
    NotFoundError,
)
from modules.alerts.helpers import AlertHelpers
from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertFrequency,
    AlertMetadata,
    AlertPreferences,
    AlertRecipient,
    AlertSeverity,
    AlertStats,
    AlertStatus,
    AlertType,
    DeliveryAttempt,
    DispatchOutcome,
    QuietHours,
)
from modules.alerts.repository import AlertRepository, InMemoryAlertRepository

__all__ = [
    "Alert",
    "AlertChannel",
    "AlertDeliveryResult",
    "AlertDispatcher",
    "AlertError",
    "AlertFrequency",
    "AlertHelpers",
    "AlertMetadata",
    "AlertPreferences",
    "AlertRecipient",
    "AlertRepository",
    "AlertSeverity",
    "AlertStats",
    "AlertStatus",
    "AlertSystem",
    "AlertType",
    "AlreadySentError",
    "DeliveryAttempt",
    "DispatchOutcome",
    "DuplicateObserverError",
    "InMemoryAlertRepository",
    "InvalidStateError",
    "NotFoundError",
    "QuietHours",
    "init_alert_system",
]
