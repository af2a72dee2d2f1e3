"""Messages and sessions of the realtime presentation surface."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, Optional

from pydantic import BaseModel, Field


class BrowserPermission(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


class ToastAction(BaseModel):
    label: str
    url: str


class ToastMessage(BaseModel):
    """In-app toast rendered by the connected client."""

    alert_id: str
    title: str
    message: str
    style: str
    duration_ms: int
    action: Optional[ToastAction] = None


class BrowserNotificationMessage(BaseModel):
    """Native browser notification shown by the connected client.

    ``auto_close_ms`` of None means the notification stays until dismissed.
    """

    alert_id: str
    title: str
    body: str
    icon: str
    badge: str
    tag: str
    require_interaction: bool = False
    auto_close_ms: Optional[int] = None
    click_url: Optional[str] = None
    focus_on_click: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)


class RealtimeEnvelope(BaseModel):
    """What a client drains from its session queue."""

    event_type: str
    payload: Dict[str, Any]
    published_at: datetime


@dataclass
class UserSession:
    user_id: str
    browser_supported: bool = False
    permission: BrowserPermission = BrowserPermission.DEFAULT
    queue: Deque[RealtimeEnvelope] = field(default_factory=lambda: deque(maxlen=100))

    @property
    def can_show_browser_notifications(self) -> bool:
        return self.browser_supported and self.permission == BrowserPermission.GRANTED
