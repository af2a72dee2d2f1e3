"""Push provider contract and payload model."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from infrastructure.operations import OperationResult


class PushNotification(BaseModel):
    """Provider-neutral push payload.

    Attributes:
        tokens: Device tokens / player ids to deliver to
        title: Notification title
        body: Notification body
        data: Custom data delivered to the app
        badge: Badge count shown on the app icon
        sound: Sound file name, or "default"
        priority: Delivery priority hint ("high" or "normal")
    """

    tokens: List[str] = Field(default_factory=list)
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    badge: int = 1
    sound: str = "default"
    priority: str = "high"


class PushProvider(ABC):
    """Abstract base class for push providers (Firebase, OneSignal, Expo).

    Providers report failures as error OperationResults rather than raise.
    On success ``data`` holds ``{"message_id": ...}``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def send(self, notification: PushNotification) -> OperationResult:
        pass
