"""Realtime presentation surface for in-app and browser alerts."""

from integrations.realtime.models import (
    BrowserNotificationMessage,
    BrowserPermission,
    RealtimeEnvelope,
    ToastAction,
    ToastMessage,
    UserSession,
)
from integrations.realtime.registry import SessionRegistry

__all__ = [
    "BrowserNotificationMessage",
    "BrowserPermission",
    "RealtimeEnvelope",
    "SessionRegistry",
    "ToastAction",
    "ToastMessage",
    "UserSession",
]
