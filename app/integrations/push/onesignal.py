"""OneSignal push provider."""

from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.push.base import PushNotification, PushProvider

logger = get_module_logger()

ONESIGNAL_API_URL = "https://onesignal.com/api/v1/notifications"


def build_onesignal_payload(
    app_id: str, notification: PushNotification
) -> Dict[str, Any]:
    return {
        "app_id": app_id,
        "include_player_ids": notification.tokens,
        "headings": {"en": notification.title},
        "contents": {"en": notification.body},
        "data": notification.data,
        "ios_badgeType": "Increase",
        "ios_badgeCount": notification.badge,
    }


class OneSignalProvider(PushProvider):
    def __init__(
        self, api_key: Optional[str], app_id: Optional[str], timeout: float = 10.0
    ):
        self.api_key = api_key
        self.app_id = app_id
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "onesignal"

    def send(self, notification: PushNotification) -> OperationResult:
        if not self.api_key or not self.app_id:
            return OperationResult.permanent_error(
                "PUSH_API_KEY and ONESIGNAL_APP_ID are required for onesignal",
                error_code="MISSING_CREDENTIALS",
            )

        try:
            response = requests.post(
                ONESIGNAL_API_URL,
                json=build_onesignal_payload(self.app_id, notification),
                headers={"Authorization": f"Basic {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            return classify_http_error(exc, provider="onesignal")

        try:
            body = response.json()
        except ValueError:
            body = {}

        notification_id = body.get("id") if isinstance(body, dict) else None
        if not notification_id:
            errors = body.get("errors") if isinstance(body, dict) else None
            logger.warning("onesignal_push_rejected", errors=errors)
            return OperationResult.permanent_error(
                f"onesignal did not create a notification: {errors}",
                error_code="PUSH_REJECTED",
            )

        return OperationResult.success(
            data={"message_id": notification_id}, message="Push sent via OneSignal"
        )
