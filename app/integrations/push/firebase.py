"""Firebase Cloud Messaging push provider (legacy HTTP API)."""

from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.push.base import PushNotification, PushProvider

logger = get_module_logger()

FCM_API_URL = "https://fcm.googleapis.com/fcm/send"


def build_fcm_payload(notification: PushNotification) -> Dict[str, Any]:
    return {
        "registration_ids": notification.tokens,
        "notification": {
            "title": notification.title,
            "body": notification.body,
            "sound": notification.sound,
            "badge": notification.badge,
        },
        "data": notification.data,
        "priority": notification.priority,
    }


class FirebaseProvider(PushProvider):
    def __init__(self, server_key: Optional[str], timeout: float = 10.0):
        self.server_key = server_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "firebase"

    def send(self, notification: PushNotification) -> OperationResult:
        if not self.server_key:
            return OperationResult.permanent_error(
                "PUSH_API_KEY is not configured for firebase",
                error_code="MISSING_CREDENTIALS",
            )

        try:
            response = requests.post(
                FCM_API_URL,
                json=build_fcm_payload(notification),
                headers={"Authorization": f"key={self.server_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            return classify_http_error(exc, provider="firebase")

        try:
            body = response.json()
        except ValueError:
            body = {}

        # FCM answers 200 even when every token was rejected
        if not isinstance(body, dict) or body.get("success", 0) <= 0:
            failure = body.get("failure") if isinstance(body, dict) else None
            logger.warning("firebase_push_rejected", failure=failure)
            return OperationResult.permanent_error(
                f"firebase delivered to no device (failure={failure})",
                error_code="PUSH_REJECTED",
            )

        return OperationResult.success(
            data={
                "message_id": str(body.get("multicast_id")),
                "success": body.get("success"),
                "failure": body.get("failure", 0),
            },
            message="Push sent via Firebase",
        )
