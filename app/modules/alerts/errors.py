"""Orchestration errors for the alerts module.

Transport failures never surface as exceptions; they are recorded as failed
delivery results. These errors report misuse of the dispatcher itself.
"""


class AlertError(Exception):
    """Base exception for all alert dispatch errors.

    Example:
        try:
            dispatcher.retry(alert_id)
        except AlertError as e:
            logger.warning("alert_retry_rejected", error=str(e))
    """

    pass


class NotFoundError(AlertError):
    """Raised when an alert id is unknown to the dispatcher.

    Example:
        >>> dispatcher.retry("alert-missing")
        Traceback (most recent call last):
        ...
        NotFoundError: Alert 'alert-missing' not found
    """

    def __init__(self, alert_id: str):
        super().__init__(f"Alert '{alert_id}' not found")
        self.alert_id = alert_id


class AlreadySentError(AlertError):
    """Raised when retrying an alert that already reached a recipient."""

    def __init__(self, alert_id: str):
        super().__init__(f"Alert '{alert_id}' was already sent")
        self.alert_id = alert_id


class InvalidStateError(AlertError):
    """Raised when an operation is not allowed from the alert's current status.

    Example:
        >>> dispatcher.cancel(sent_alert_id)
        Traceback (most recent call last):
        ...
        InvalidStateError: Cannot cancel alert 'alert-1' in status 'sent'
    """

    def __init__(self, alert_id: str, status: str, operation: str):
        super().__init__(
            f"Cannot {operation} alert '{alert_id}' in status '{status}'"
        )
        self.alert_id = alert_id
        self.status = status
        self.operation = operation


class DuplicateObserverError(AlertError):
    """Raised when attaching an observer whose id is already registered."""

    def __init__(self, observer_id: str):
        super().__init__(f"Observer '{observer_id}' already attached")
        self.observer_id = observer_id
