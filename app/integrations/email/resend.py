"""Resend email backend."""

import base64
from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.email.base import EmailBackend, EmailRequest

logger = get_module_logger()

RESEND_API_URL = "https://api.resend.com/emails"


def build_resend_payload(request: EmailRequest) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "from": request.sender,
        "to": request.to,
        "subject": request.subject,
    }
    if request.text:
        payload["text"] = request.text
    if request.html:
        payload["html"] = request.html
    if request.cc:
        payload["cc"] = request.cc
    if request.bcc:
        payload["bcc"] = request.bcc
    if request.reply_to:
        payload["reply_to"] = request.reply_to
    if request.attachments:
        payload["attachments"] = [
            {
                "filename": a.filename,
                "content": base64.b64encode(a.content).decode("ascii"),
            }
            for a in request.attachments
        ]
    return payload


class ResendBackend(EmailBackend):
    def __init__(self, api_key: Optional[str], timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "resend"

    def send(self, request: EmailRequest) -> OperationResult:
        if not self.api_key:
            return OperationResult.permanent_error(
                "EMAIL_API_KEY is not configured for resend",
                error_code="MISSING_CREDENTIALS",
            )

        try:
            response = requests.post(
                RESEND_API_URL,
                json=build_resend_payload(request),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            result = classify_http_error(exc, provider="resend")
            logger.error(
                "resend_send_failed",
                error=result.message,
                error_code=result.error_code,
            )
            return result

        try:
            body = response.json()
        except ValueError:
            body = {}
        message_id = body.get("id") if isinstance(body, dict) else None
        logger.info("resend_email_sent", message_id=message_id)
        return OperationResult.success(
            data={"message_id": message_id}, message="Email sent via Resend"
        )
