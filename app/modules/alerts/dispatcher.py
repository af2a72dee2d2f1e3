"""Alert dispatcher with concurrent multi-channel fan-out.

The dispatcher owns alerts and their delivery history:
- Creates alerts and sends them immediately or keeps them scheduled
- Fans each alert out to every eligible observer, one thread per call
- Bounds every observer call with a timeout that starts with the call
- Caps the calls in flight per observer so a stalled transport stays contained
- Serializes status changes per alert id (retry, cancel, send)
- Keeps per-attempt delivery history and statistics

Usage Example:
    from modules.alerts import AlertDispatcher, AlertType, AlertSeverity, AlertChannel
    from modules.alerts.observers import EmailObserver

    dispatcher = AlertDispatcher(observer_timeout_seconds=10)
    dispatcher.attach(EmailObserver(email_service))

    outcome = dispatcher.create_and_notify(
        type=AlertType.PAYMENT_CONFIRMED,
        severity=AlertSeverity.SUCCESS,
        title="Pago confirmado",
        message="Recibimos tu pago",
        recipients=[AlertRecipient(user_id="u1", email="u1@example.com")],
        channels=[AlertChannel.EMAIL],
    )
    if outcome.alert.status == AlertStatus.FAILED:
        ...
"""

import contextvars
import threading
from collections import Counter
from concurrent.futures import Future, wait
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from infrastructure.logging import bind_alert_context, get_module_logger
from modules.alerts.errors import (
    AlreadySentError,
    AlertError,
    DuplicateObserverError,
    InvalidStateError,
    NotFoundError,
)
from modules.alerts.models import (
    SENT_STATUSES,
    Alert,
    AlertChannel,
    AlertDeliveryResult,
    AlertMetadata,
    AlertRecipient,
    AlertSeverity,
    AlertStats,
    AlertStatus,
    AlertType,
    DeliveryAttempt,
    DispatchOutcome,
    ensure_aware,
    utcnow,
)
from modules.alerts.observers.base import AlertObserver
from modules.alerts.repository import AlertRepository, InMemoryAlertRepository

logger = get_module_logger()

SENDABLE_STATUSES = frozenset(
    {AlertStatus.PENDING, AlertStatus.SCHEDULED, AlertStatus.FAILED}
)
CANCELLABLE_STATUSES = SENDABLE_STATUSES


class AlertDispatcher:
    """Subject of the observer pattern: routes alerts to channel observers.

    Attributes:
        observer_timeout_seconds: Time limit of one observer call. Expiry
            fails that observer's channels only.
        max_workers: Calls one observer may have in flight. Further calls
            to a saturated observer fail its channels at once.

    Status policy: an attempt ends SENT when at least one channel
    succeeded and FAILED otherwise, including when no observer was eligible.
    There is no partially-sent status; per-channel truth lives in the results.
    """

    def __init__(
        self,
        repository: Optional[AlertRepository] = None,
        observer_timeout_seconds: float = 30.0,
        max_workers: int = 8,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.observer_timeout_seconds = observer_timeout_seconds
        self.max_workers = max_workers
        self._repository = repository or InMemoryAlertRepository()
        self._clock = clock
        self._observers: Dict[str, AlertObserver] = {}
        self._observers_lock = threading.Lock()
        self._alert_locks: Dict[str, threading.Lock] = {}
        self._alert_locks_lock = threading.Lock()
        self._observer_slots: Dict[str, threading.BoundedSemaphore] = {}
        self._closed = False

        logger.info(
            "initialized_alert_dispatcher",
            observer_timeout_seconds=observer_timeout_seconds,
            max_workers=max_workers,
            repository=type(self._repository).__name__,
        )

    # Observer registry

    def attach(self, observer: AlertObserver) -> None:
        """Register an observer for all future fan-outs.

        Raises:
            DuplicateObserverError: If an observer with the same id is attached.
        """
        with self._observers_lock:
            if observer.id in self._observers:
                raise DuplicateObserverError(observer.id)
            self._observers[observer.id] = observer

        logger.info(
            "alert_observer_attached",
            observer_id=observer.id,
            channels=[c.value for c in observer.channels],
        )

    def detach(self, observer_id: str) -> bool:
        """Remove an observer. In-flight fan-outs are not affected."""
        with self._observers_lock:
            removed = self._observers.pop(observer_id, None) is not None
        if removed:
            logger.info("alert_observer_detached", observer_id=observer_id)
        return removed

    def get_observer(self, observer_id: str) -> Optional[AlertObserver]:
        with self._observers_lock:
            return self._observers.get(observer_id)

    def get_observers(self) -> List[AlertObserver]:
        with self._observers_lock:
            return list(self._observers.values())

    def get_observers_by_channels(
        self, channels: Iterable[AlertChannel]
    ) -> List[AlertObserver]:
        """Observers owning at least one of ``channels``, in attach order."""
        wanted = set(channels)
        return [o for o in self.get_observers() if wanted.intersection(o.channels)]

    # Dispatch

    def create_and_notify(
        self,
        type: AlertType,
        severity: AlertSeverity,
        title: str,
        message: str,
        recipients: Sequence[Union[AlertRecipient, Dict[str, Any]]],
        channels: Sequence[AlertChannel],
        metadata: Optional[Union[AlertMetadata, Dict[str, Any]]] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> DispatchOutcome:
        """Create an alert and send it now, or keep it scheduled.

        The alert is SCHEDULED (and nothing is sent) when ``scheduled_for``
        is strictly in the future; otherwise it is sent immediately.

        Returns:
            DispatchOutcome with the stored alert and the send results
            (empty for scheduled alerts).
        """
        now = self._clock()
        scheduled_for = ensure_aware(scheduled_for)
        deferred = scheduled_for is not None and scheduled_for > now

        alert = Alert(
            type=type,
            severity=severity,
            title=title,
            message=message,
            recipients=list(recipients),
            channels=list(channels),
            metadata=metadata if metadata is not None else AlertMetadata(),
            timestamp=now,
            scheduled_for=scheduled_for,
            status=AlertStatus.SCHEDULED if deferred else AlertStatus.PENDING,
        )
        self._repository.add(alert)

        logger.info(
            "alert_created",
            alert_id=alert.id,
            alert_type=alert.type.value,
            severity=alert.severity.value,
            channels=[c.value for c in alert.channels],
            recipient_count=len(alert.recipients),
            scheduled_for=scheduled_for.isoformat() if deferred else None,
        )

        if deferred:
            return DispatchOutcome(alert=alert, results=[])

        results = self.notify(alert)
        return DispatchOutcome(alert=self._require(alert.id), results=results)

    def notify(self, alert: Alert) -> List[AlertDeliveryResult]:
        """Fan ``alert`` out to every eligible observer and wait for all of them.

        Alerts not yet known to the dispatcher are stored first. Transport
        failures are returned as failed results, never raised.

        Raises:
            InvalidStateError: If the alert is sending, sent or cancelled.
        """
        if self._repository.get(alert.id) is None:
            self._repository.add(alert)
        return self._send(alert.id, operation="send")

    def retry(self, alert_id: str) -> List[AlertDeliveryResult]:
        """Re-run the full fan-out for an alert that has not been sent.

        Raises:
            NotFoundError: Unknown alert id.
            AlreadySentError: Alert is sent, delivered or read.
            InvalidStateError: Alert is sending or cancelled.
        """
        return self._send(alert_id, operation="retry", is_retry=True)

    def send_now(self, alert_id: str) -> List[AlertDeliveryResult]:
        """Send a pending or scheduled alert immediately, ignoring its schedule.

        Raises:
            NotFoundError: Unknown alert id.
            InvalidStateError: Alert is not pending or scheduled.
        """
        return self._send(
            alert_id,
            operation="send",
            allowed=frozenset({AlertStatus.PENDING, AlertStatus.SCHEDULED}),
        )

    def dispatch_due(
        self, now: Optional[datetime] = None
    ) -> Dict[str, List[AlertDeliveryResult]]:
        """Send every scheduled alert whose time has come.

        Alerts cancelled or sent concurrently are skipped.

        Returns:
            Results keyed by alert id for the alerts sent by this call.
        """
        now = ensure_aware(now) or self._clock()
        due = [
            a
            for a in self._repository.list()
            if a.status == AlertStatus.SCHEDULED and a.is_due(now)
        ]
        dispatched: Dict[str, List[AlertDeliveryResult]] = {}
        for alert in due:
            try:
                dispatched[alert.id] = self.send_now(alert.id)
            except AlertError as exc:
                logger.info("scheduled_alert_skipped", alert_id=alert.id, reason=str(exc))

        if due:
            logger.info("due_alerts_dispatched", due=len(due), sent=len(dispatched))
        return dispatched

    def cancel(self, alert_id: str) -> bool:
        """Cancel an alert that has not started sending.

        Returns:
            True once the alert is cancelled (also when it already was),
            False if the id is unknown.

        Raises:
            InvalidStateError: Alert is sending, sent, delivered or read.
        """
        with self._lock_for(alert_id):
            alert = self._repository.get(alert_id)
            if alert is None:
                return False
            if alert.status == AlertStatus.CANCELLED:
                return True
            if alert.status not in CANCELLABLE_STATUSES:
                raise InvalidStateError(alert_id, alert.status.value, "cancel")
            alert.status = AlertStatus.CANCELLED
            self._repository.save(alert)

        logger.info("alert_cancelled", alert_id=alert_id)
        return True

    def mark_delivered(self, alert_id: str) -> Alert:
        """Record client-side delivery of a sent alert."""
        return self._track(
            alert_id,
            allowed=frozenset({AlertStatus.SENT}),
            status=AlertStatus.DELIVERED,
            field="delivered_at",
            operation="mark delivered",
        )

    def mark_read(self, alert_id: str) -> Alert:
        """Record that the recipient read a sent or delivered alert."""
        return self._track(
            alert_id,
            allowed=frozenset({AlertStatus.SENT, AlertStatus.DELIVERED}),
            status=AlertStatus.READ,
            field="read_at",
            operation="mark read",
        )

    # Queries

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        return self._repository.get(alert_id)

    def get_all_alerts(self) -> List[Alert]:
        return self._repository.list()

    def get_delivery_history(self, alert_id: str) -> List[AlertDeliveryResult]:
        """All results of all attempts, oldest attempt first."""
        return [
            result
            for attempt in self._repository.get_attempts(alert_id)
            for result in attempt.results
        ]

    def get_delivery_attempts(self, alert_id: str) -> List[DeliveryAttempt]:
        return self._repository.get_attempts(alert_id)

    def clean_history(self, older_than: datetime) -> int:
        """Remove alerts created strictly before ``older_than``, whatever their status.

        Returns:
            Number of alerts removed.
        """
        removed = self._repository.delete_older_than(ensure_aware(older_than))
        with self._alert_locks_lock:
            for alert_id in removed:
                self._alert_locks.pop(alert_id, None)

        logger.info(
            "alert_history_cleaned",
            older_than=older_than.isoformat(),
            removed=len(removed),
        )
        return len(removed)

    def get_stats(self) -> AlertStats:
        alerts = self._repository.list()
        return AlertStats(
            total=len(alerts),
            observers=len(self.get_observers()),
            by_status=dict(Counter(a.status.value for a in alerts)),
            by_type=dict(Counter(a.type.value for a in alerts)),
            by_severity=dict(Counter(a.severity.value for a in alerts)),
        )

    def close(self) -> None:
        """Stop accepting fan-outs. Stalled observer threads are not joined."""
        self._closed = True
        logger.info("alert_dispatcher_closed")

    # Internals

    def _lock_for(self, alert_id: str) -> threading.Lock:
        with self._alert_locks_lock:
            return self._alert_locks.setdefault(alert_id, threading.Lock())

    def _require(self, alert_id: str) -> Alert:
        alert = self._repository.get(alert_id)
        if alert is None:
            raise NotFoundError(alert_id)
        return alert

    def _send(
        self,
        alert_id: str,
        operation: str,
        is_retry: bool = False,
        allowed: frozenset = SENDABLE_STATUSES,
    ) -> List[AlertDeliveryResult]:
        if self._closed:
            raise RuntimeError("AlertDispatcher is closed")

        # Claim SENDING under the alert lock so racing retries/cancels lose.
        with self._lock_for(alert_id):
            alert = self._require(alert_id)
            if is_retry and alert.status in SENT_STATUSES:
                raise AlreadySentError(alert_id)
            if alert.status not in allowed:
                raise InvalidStateError(alert_id, alert.status.value, operation)
            if is_retry:
                alert.retry_count += 1
            alert.status = AlertStatus.SENDING
            self._repository.save(alert)

        started_at = self._clock()
        with bind_alert_context(alert_id=alert.id, alert_type=alert.type.value):
            results = self._fan_out(alert)
            self._finalize(alert_id, results, started_at)
        return results

    def _fan_out(self, alert: Alert) -> List[AlertDeliveryResult]:
        candidates = [
            o
            for o in self.get_observers_by_channels(alert.channels)
            if self._can_handle(o, alert)
        ]
        if not candidates:
            logger.warning(
                "alert_no_eligible_observers",
                channels=[c.value for c in alert.channels],
            )
            return []

        calls: List[Tuple[AlertObserver, Optional[Future]]] = [
            (observer, self._start_call(observer, alert)) for observer in candidates
        ]
        started = [future for _, future in calls if future is not None]
        not_done = wait(started, timeout=self.observer_timeout_seconds).not_done

        results: List[AlertDeliveryResult] = []
        for observer, future in calls:
            channels = self._owned_channels(observer, alert)
            if future is None:
                error = (
                    f"Observer '{observer.id}' is busy with "
                    f"{self.max_workers} calls in flight"
                )
                results.extend(self._failures(observer, channels, error))
                continue

            if future in not_done:
                logger.warning(
                    "alert_observer_timed_out",
                    observer_id=observer.id,
                    timeout_seconds=self.observer_timeout_seconds,
                )
                error = (
                    f"Observer '{observer.id}' timed out after "
                    f"{self.observer_timeout_seconds}s"
                )
                results.extend(self._failures(observer, channels, error))
                continue

            exc = future.exception()
            if exc is not None:
                logger.error(
                    "alert_observer_raised",
                    observer_id=observer.id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                error = f"{type(exc).__name__}: {exc}"
                results.extend(self._failures(observer, channels, error))
                continue

            results.extend(future.result())
        return results

    def _start_call(self, observer: AlertObserver, alert: Alert) -> Optional[Future]:
        """Run one observer call on its own thread.

        Returns None without starting anything when the observer already has
        ``max_workers`` calls in flight.
        """
        slots = self._slots_for(observer.id)
        if not slots.acquire(blocking=False):
            logger.warning(
                "alert_observer_busy",
                observer_id=observer.id,
                in_flight=self.max_workers,
            )
            return None

        future: Future = Future()
        # Each call gets its own copy of the alert and of the log context.
        snapshot = alert.model_copy(deep=True)
        ctx = contextvars.copy_context()

        def _run() -> None:
            try:
                future.set_running_or_notify_cancel()
                try:
                    future.set_result(self._invoke(observer, snapshot))
                except Exception as exc:
                    future.set_exception(exc)
            finally:
                slots.release()

        threading.Thread(
            target=ctx.run,
            args=(_run,),
            name=f"alert-fanout-{observer.id}",
            daemon=True,
        ).start()
        return future

    def _slots_for(self, observer_id: str) -> threading.BoundedSemaphore:
        with self._observers_lock:
            return self._observer_slots.setdefault(
                observer_id, threading.BoundedSemaphore(self.max_workers)
            )

    def _can_handle(self, observer: AlertObserver, alert: Alert) -> bool:
        try:
            return bool(observer.can_handle(alert))
        except Exception as exc:
            logger.error(
                "alert_observer_can_handle_failed",
                observer_id=observer.id,
                error=str(exc),
            )
            return False

    def _invoke(
        self, observer: AlertObserver, alert: Alert
    ) -> List[AlertDeliveryResult]:
        outcome = observer.notify(alert)
        returned = (
            [outcome] if isinstance(outcome, AlertDeliveryResult) else list(outcome)
        )
        for item in returned:
            if not isinstance(item, AlertDeliveryResult):
                raise TypeError(
                    f"Observer '{observer.id}' returned {type(item).__name__}"
                )

        # Exactly one result per owned channel the alert requested.
        by_channel: Dict[AlertChannel, AlertDeliveryResult] = {}
        for item in returned:
            by_channel.setdefault(item.channel, item)
        return [
            by_channel.get(channel)
            or AlertDeliveryResult.failed(
                channel,
                f"Observer '{observer.id}' returned no result for {channel.value}",
                metadata={"observer_id": observer.id},
            )
            for channel in self._owned_channels(observer, alert)
        ]

    @staticmethod
    def _owned_channels(observer: AlertObserver, alert: Alert) -> List[AlertChannel]:
        return [c for c in observer.channels if c in alert.channels]

    @staticmethod
    def _failures(
        observer: AlertObserver, channels: List[AlertChannel], error: str
    ) -> List[AlertDeliveryResult]:
        return [
            AlertDeliveryResult.failed(
                channel, error, metadata={"observer_id": observer.id}
            )
            for channel in channels
        ]

    def _finalize(
        self,
        alert_id: str,
        results: List[AlertDeliveryResult],
        started_at: datetime,
    ) -> None:
        finished_at = self._clock()
        succeeded = any(r.success for r in results)

        with self._lock_for(alert_id):
            alert = self._repository.get(alert_id)
            if alert is None:
                logger.warning("alert_removed_during_dispatch")
                return

            attempt = DeliveryAttempt(
                attempt=len(self._repository.get_attempts(alert_id)) + 1,
                started_at=started_at,
                finished_at=finished_at,
                results=tuple(results),
            )
            self._repository.append_attempt(alert_id, attempt)

            alert.status = AlertStatus.SENT if succeeded else AlertStatus.FAILED
            if succeeded:
                alert.sent_at = finished_at
            self._repository.save(alert)

        logger.info(
            "alert_dispatched",
            status=alert.status.value,
            attempt=attempt.attempt,
            result_count=len(results),
            success_count=sum(1 for r in results if r.success),
            failed_channels=[r.channel.value for r in results if not r.success],
        )

    def _track(
        self,
        alert_id: str,
        allowed: frozenset,
        status: AlertStatus,
        field: str,
        operation: str,
    ) -> Alert:
        with self._lock_for(alert_id):
            alert = self._require(alert_id)
            if alert.status not in allowed:
                raise InvalidStateError(alert_id, alert.status.value, operation)
            alert.status = status
            setattr(alert, field, self._clock())
            self._repository.save(alert)

        logger.info("alert_status_tracked", alert_id=alert_id, status=status.value)
        return alert
