"""Alert observer abstract base class.

All channel observers (Email, Push, In-App, Browser) implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, Union

from infrastructure.operations import OperationResult
from modules.alerts.models import (
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertRecipient,
)

ObserverResult = Union[AlertDeliveryResult, Sequence[AlertDeliveryResult]]


def failure_metadata(result: OperationResult, **extra: Any) -> Dict[str, Any]:
    """Metadata of a failed delivery built from a transport error result."""
    metadata: Dict[str, Any] = {
        **extra,
        "error_code": result.error_code,
        "retryable": result.is_retryable,
    }
    if result.retry_after is not None:
        metadata["retry_after"] = result.retry_after
    return metadata


class AlertObserver(ABC):
    """Abstract base class for alert observers.

    Each observer delivers alerts over the channels it owns. The dispatcher
    only calls ``notify`` when the alert requests one of those channels and
    ``can_handle`` returned True.

    Example Implementation:
        class SmsObserver(AlertObserver):
            id = "sms-observer"
            channels = (AlertChannel.SMS,)

            def can_handle(self, alert: Alert) -> bool:
                return self.requested(alert) and bool(alert.recipients)

            def notify(self, alert: Alert) -> AlertDeliveryResult:
                ...
    """

    id: str
    channels: Sequence[AlertChannel]

    @abstractmethod
    def can_handle(self, alert: Alert) -> bool:
        """Whether this observer can deliver ``alert`` right now.

        Must check that a requested channel is owned, that some recipient has
        a usable address for it, and that any ambient capability (a live
        session, a granted permission) is available. Must not perform I/O.
        """
        pass

    @abstractmethod
    def notify(self, alert: Alert) -> ObserverResult:
        """Attempt delivery of ``alert``.

        Must not raise: failures are returned as results with
        ``success=False``. Observers owning several channels may return one
        result per channel.
        """
        pass

    def requested(self, alert: Alert) -> bool:
        return any(channel in alert.channels for channel in self.channels)

    def eligible_recipients(
        self, alert: Alert, channel: AlertChannel
    ) -> List[AlertRecipient]:
        """Recipients whose preferences allow ``alert`` on ``channel``."""
        return [r for r in alert.recipients if r.accepts(channel, alert.type)]
