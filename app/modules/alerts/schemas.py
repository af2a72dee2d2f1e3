"""Request and response models for the alert admin and session endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from integrations.realtime import BrowserPermission, RealtimeEnvelope
from modules.alerts.models import AlertDeliveryResult, AlertStatus


class DispatchResponse(BaseModel):
    alert_id: str
    status: AlertStatus
    results: List[AlertDeliveryResult]


class CancelResponse(BaseModel):
    alert_id: str
    cancelled: bool


class CleanResponse(BaseModel):
    older_than: datetime
    removed: int


class ConnectSessionRequest(BaseModel):
    browser_supported: bool = False
    permission: BrowserPermission = BrowserPermission.DEFAULT


class PermissionUpdateRequest(BaseModel):
    permission: BrowserPermission


class SessionResponse(BaseModel):
    user_id: str
    connected: bool
    can_show_browser_notifications: bool = False


class DrainResponse(BaseModel):
    user_id: str
    messages: List[RealtimeEnvelope] = Field(default_factory=list)
    limit: Optional[int] = None
