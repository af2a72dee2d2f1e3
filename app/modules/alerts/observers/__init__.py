"""Channel observers."""

from modules.alerts.observers.base import AlertObserver, ObserverResult
from modules.alerts.observers.browser import BrowserObserver
from modules.alerts.observers.email import EmailObserver
from modules.alerts.observers.in_app import InAppObserver
from modules.alerts.observers.push import PushObserver

__all__ = [
    "AlertObserver",
    "ObserverResult",
    "BrowserObserver",
    "EmailObserver",
    "InAppObserver",
    "PushObserver",
]
