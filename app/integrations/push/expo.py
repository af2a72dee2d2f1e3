"""Expo push provider."""

from typing import Any, Dict, List, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.push.base import PushNotification, PushProvider

logger = get_module_logger()

EXPO_API_URL = "https://exp.host/--/api/v2/push/send"


def build_expo_messages(notification: PushNotification) -> List[Dict[str, Any]]:
    return [
        {
            "to": token,
            "title": notification.title,
            "body": notification.body,
            "data": notification.data,
            "badge": notification.badge,
            "sound": notification.sound,
            "priority": notification.priority,
        }
        for token in notification.tokens
    ]


class ExpoProvider(PushProvider):
    """Expo push service. The access token is optional."""

    def __init__(self, access_token: Optional[str] = None, timeout: float = 10.0):
        self.access_token = access_token
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "expo"

    def send(self, notification: PushNotification) -> OperationResult:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            response = requests.post(
                EXPO_API_URL,
                json=build_expo_messages(notification),
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            return classify_http_error(exc, provider="expo")

        try:
            body = response.json()
        except ValueError:
            body = {}

        tickets = body.get("data") if isinstance(body, dict) else None
        if not isinstance(tickets, list) or not tickets:
            return OperationResult.permanent_error(
                "expo returned no push tickets", error_code="PUSH_REJECTED"
            )

        failed = [t for t in tickets if not isinstance(t, dict) or t.get("status") != "ok"]
        if failed:
            logger.warning(
                "expo_push_rejected", failed_count=len(failed), total=len(tickets)
            )
            first = failed[0] if isinstance(failed[0], dict) else {}
            return OperationResult.permanent_error(
                f"expo rejected {len(failed)}/{len(tickets)} messages: "
                f"{first.get('message', 'unknown error')}",
                error_code="PUSH_REJECTED",
            )

        return OperationResult.success(
            data={"message_id": tickets[0].get("id"), "ticket_count": len(tickets)},
            message="Push sent via Expo",
        )
