"""Alert data model.

Typed alerts, their recipients and delivery results. Uses Pydantic
BaseModel for:
- RFC 5322 email validation (EmailStr) on recipients
- Runtime validation of channels, types and quiet hours
- JSON serialization for the admin API

Only the dispatcher changes an alert's status; everything handed out to
callers and observers is a copy.
"""

import re
import uuid
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_alert_id() -> str:
    """Return a new, globally unique alert id (``alert-<hex>``)."""
    return f"alert-{uuid.uuid4().hex}"


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    SUCCESS = "success"


class AlertType(str, Enum):
    RESERVATION_CONFIRMED = "reservation_confirmed"
    RESERVATION_CANCELLED = "reservation_cancelled"
    RESERVATION_REMINDER = "reservation_reminder"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PAYMENT_FAILED = "payment_failed"
    SLOT_RELEASED = "slot_released"
    CHALLENGE_CREATED = "challenge_created"
    CHALLENGE_ACCEPTED = "challenge_accepted"
    CHALLENGE_REJECTED = "challenge_rejected"
    SYSTEM_MAINTENANCE = "system_maintenance"
    ACCOUNT_UPDATE = "account_update"
    CUSTOM = "custom"


class AlertChannel(str, Enum):
    """Delivery channels.

    SMS is reserved: no observer handles it yet.
    """

    EMAIL = "email"
    PUSH = "push"
    IN_APP = "in_app"
    BROWSER = "browser"
    SMS = "sms"


class AlertStatus(str, Enum):
    """Lifecycle status of an alert.

    PENDING/SCHEDULED -> SENDING -> SENT | FAILED
    PENDING/SCHEDULED/FAILED -> CANCELLED
    SENT -> DELIVERED -> READ, SENT -> READ
    FAILED -> SENDING (retry)
    """

    PENDING = "pending"
    SCHEDULED = "scheduled"
    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELLED = "cancelled"
    READ = "read"


SENT_STATUSES = frozenset({AlertStatus.SENT, AlertStatus.DELIVERED, AlertStatus.READ})

# Channels that interrupt the recipient and are held back during quiet hours.
INTERRUPTIVE_CHANNELS = frozenset({AlertChannel.PUSH, AlertChannel.BROWSER})


class AlertFrequency(str, Enum):
    IMMEDIATE = "immediate"
    BATCHED = "batched"
    DIGEST = "digest"


_HH_MM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class QuietHours(BaseModel):
    """Daily window (``HH:MM``, may wrap midnight) without interruptions."""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_hh_mm(cls, v: str) -> str:
        if not _HH_MM.match(v):
            raise ValueError(f"Quiet hours must use HH:MM format: {v}")
        return v

    def contains(self, moment: time) -> bool:
        start = time.fromisoformat(self.start)
        end = time.fromisoformat(self.end)
        if start == end:
            return False
        if start < end:
            return start <= moment < end
        return moment >= start or moment < end


class AlertPreferences(BaseModel):
    """Recipient delivery preferences.

    Attributes:
        channels: Channels the recipient allows
        enabled_types: Alert types the recipient wants; empty means all
        quiet_hours: Optional window during which push and browser are held back
        frequency: Delivery cadence, carried for consumers
    """

    channels: List[AlertChannel] = Field(default_factory=list)
    enabled_types: List[AlertType] = Field(default_factory=list)
    quiet_hours: Optional[QuietHours] = None
    frequency: AlertFrequency = AlertFrequency.IMMEDIATE


class AlertRecipient(BaseModel):
    """Alert recipient.

    ``user_id`` identifies the recipient for in-app and browser sessions.
    Email and push token are only needed for their channels.

    Example:
        recipient = AlertRecipient(
            user_id="user-1",
            email="player@example.com",
            push_token="ExponentPushToken[abc]",
        )
    """

    user_id: str
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    push_token: Optional[str] = None
    preferences: Optional[AlertPreferences] = None

    @field_validator("email", "push_token", "phone_number", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def accepts(
        self,
        channel: AlertChannel,
        alert_type: AlertType,
        at: Optional[datetime] = None,
    ) -> bool:
        """Whether preferences allow delivering ``alert_type`` over ``channel``.

        No preferences means everything is accepted.
        """
        prefs = self.preferences
        if prefs is None:
            return True
        if channel not in prefs.channels:
            return False
        if prefs.enabled_types and alert_type not in prefs.enabled_types:
            return False
        if prefs.quiet_hours is not None and channel in INTERRUPTIVE_CHANNELS:
            moment = (ensure_aware(at) or utcnow()).time()
            if prefs.quiet_hours.contains(moment):
                return False
        return True


class AlertMetadata(BaseModel):
    """Alert context used by templates and deep links.

    Unknown keys are kept so producers can attach extra context.
    """

    model_config = ConfigDict(extra="allow")

    reservation_id: Optional[str] = None
    court_id: Optional[str] = None
    club_id: Optional[str] = None
    challenge_id: Optional[str] = None
    action_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    priority: Optional[int] = None
    court_name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    price: Optional[float] = None
    amount: Optional[float] = None
    payment_method: Optional[str] = None
    reason: Optional[str] = None

    def template_variables(self) -> Dict[str, str]:
        """Present, non-empty values rendered as strings, extras included."""
        variables: Dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            text = value.isoformat() if isinstance(value, datetime) else str(value)
            if text != "":
                variables[key] = text
        return variables


class Alert(BaseModel):
    """A typed alert and its delivery state.

    Attributes:
        id: Unique, immutable identifier
        type: AlertType
        severity: AlertSeverity
        title: Short headline
        message: Body text
        recipients: Ordered recipients
        channels: Requested delivery channels
        metadata: AlertMetadata
        timestamp: Creation time (UTC)
        scheduled_for: Time the alert becomes due, if deferred
        sent_at, delivered_at, read_at: Lifecycle timestamps
        retry_count: Number of retries performed
        status: AlertStatus
    """

    id: str = Field(default_factory=generate_alert_id, frozen=True)
    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    recipients: List[AlertRecipient] = Field(default_factory=list)
    channels: List[AlertChannel] = Field(default_factory=list)
    metadata: AlertMetadata = Field(default_factory=AlertMetadata)
    timestamp: datetime = Field(default_factory=utcnow)
    scheduled_for: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    retry_count: int = 0
    status: AlertStatus = AlertStatus.PENDING

    @field_validator(
        "timestamp", "scheduled_for", "sent_at", "delivered_at", "read_at"
    )
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v)

    def is_due(self, now: Optional[datetime] = None) -> bool:
        if self.scheduled_for is None:
            return True
        return self.scheduled_for <= (ensure_aware(now) or utcnow())


class AlertDeliveryResult(BaseModel):
    """Outcome of delivering one alert over one channel. Never mutated."""

    model_config = ConfigDict(frozen=True)

    channel: AlertChannel
    success: bool
    sent_at: Optional[datetime] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def delivered(
        cls, channel: AlertChannel, metadata: Optional[Dict[str, Any]] = None
    ) -> "AlertDeliveryResult":
        return cls(
            channel=channel,
            success=True,
            sent_at=utcnow(),
            metadata=metadata or {},
        )

    @classmethod
    def failed(
        cls,
        channel: AlertChannel,
        error: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "AlertDeliveryResult":
        return cls(channel=channel, success=False, error=error, metadata=metadata or {})


class DeliveryAttempt(BaseModel):
    """One fan-out of an alert: attempt 1 is the first send, later ones are retries."""

    model_config = ConfigDict(frozen=True)

    attempt: int
    started_at: datetime
    finished_at: datetime
    results: Tuple[AlertDeliveryResult, ...] = ()

    @property
    def succeeded(self) -> bool:
        return any(r.success for r in self.results)


class AlertStats(BaseModel):
    total: int = 0
    observers: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)


class DispatchOutcome(BaseModel):
    """Alert as stored after creation plus the results of its immediate send."""

    alert: Alert
    results: List[AlertDeliveryResult] = Field(default_factory=list)
