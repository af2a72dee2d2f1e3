"""Alert storage.

AlertRepository is the seam for persistence. The in-memory implementation
keeps alerts and delivery attempts in process memory; they do not survive a
restart.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from modules.alerts.models import Alert, DeliveryAttempt


class AlertRepository(ABC):
    """Abstract storage for alerts and their delivery history.

    Implementations must be thread-safe and must return copies so callers
    cannot change stored state.
    """

    @abstractmethod
    def add(self, alert: Alert) -> None:
        """Store a new alert. Raises ValueError if the id already exists."""
        pass

    @abstractmethod
    def save(self, alert: Alert) -> None:
        """Replace the stored version of an existing alert."""
        pass

    @abstractmethod
    def get(self, alert_id: str) -> Optional[Alert]:
        pass

    @abstractmethod
    def list(self) -> List[Alert]:
        """All alerts in creation order."""
        pass

    @abstractmethod
    def append_attempt(self, alert_id: str, attempt: DeliveryAttempt) -> None:
        pass

    @abstractmethod
    def get_attempts(self, alert_id: str) -> List[DeliveryAttempt]:
        pass

    @abstractmethod
    def delete_older_than(self, cutoff: datetime) -> List[str]:
        """Remove alerts created before ``cutoff`` with their history.

        Returns:
            Ids of the removed alerts.
        """
        pass


class InMemoryAlertRepository(AlertRepository):
    """Dict-backed repository guarded by a single lock."""

    def __init__(self) -> None:
        self._alerts: Dict[str, Alert] = {}
        self._attempts: Dict[str, List[DeliveryAttempt]] = {}
        self._lock = threading.Lock()

    def add(self, alert: Alert) -> None:
        with self._lock:
            if alert.id in self._alerts:
                raise ValueError(f"Alert '{alert.id}' already stored")
            self._alerts[alert.id] = alert.model_copy(deep=True)
            self._attempts[alert.id] = []

    def save(self, alert: Alert) -> None:
        with self._lock:
            if alert.id not in self._alerts:
                raise KeyError(alert.id)
            self._alerts[alert.id] = alert.model_copy(deep=True)

    def get(self, alert_id: str) -> Optional[Alert]:
        with self._lock:
            alert = self._alerts.get(alert_id)
            return alert.model_copy(deep=True) if alert is not None else None

    def list(self) -> List[Alert]:
        with self._lock:
            return [a.model_copy(deep=True) for a in self._alerts.values()]

    def append_attempt(self, alert_id: str, attempt: DeliveryAttempt) -> None:
        with self._lock:
            if alert_id not in self._attempts:
                raise KeyError(alert_id)
            self._attempts[alert_id].append(attempt)

    def get_attempts(self, alert_id: str) -> List[DeliveryAttempt]:
        # Attempts are frozen models, a shallow list copy is enough.
        with self._lock:
            return list(self._attempts.get(alert_id, []))

    def delete_older_than(self, cutoff: datetime) -> List[str]:
        with self._lock:
            removed = [
                alert_id
                for alert_id, alert in self._alerts.items()
                if alert.timestamp < cutoff
            ]
            for alert_id in removed:
                del self._alerts[alert_id]
                self._attempts.pop(alert_id, None)
            return removed
