"""SendGrid email backend (v3 mail send API)."""

import base64
from typing import Any, Dict, Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.email.base import EmailBackend, EmailRequest

logger = get_module_logger()

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


def build_sendgrid_payload(request: EmailRequest) -> Dict[str, Any]:
    personalization: Dict[str, Any] = {
        "to": [{"email": address} for address in request.to],
        "subject": request.subject,
    }
    if request.cc:
        personalization["cc"] = [{"email": address} for address in request.cc]
    if request.bcc:
        personalization["bcc"] = [{"email": address} for address in request.bcc]

    sender: Dict[str, str] = {"email": request.from_address or ""}
    if request.from_name:
        sender["name"] = request.from_name

    # SendGrid requires text/plain before text/html
    content = []
    if request.text:
        content.append({"type": "text/plain", "value": request.text})
    if request.html:
        content.append({"type": "text/html", "value": request.html})

    payload: Dict[str, Any] = {
        "personalizations": [personalization],
        "from": sender,
        "content": content,
    }
    if request.reply_to:
        payload["reply_to"] = {"email": request.reply_to}
    if request.attachments:
        payload["attachments"] = [
            {
                "content": base64.b64encode(a.content).decode("ascii"),
                "filename": a.filename,
                "type": a.content_type,
                "disposition": "attachment",
            }
            for a in request.attachments
        ]
    return payload


class SendGridBackend(EmailBackend):
    def __init__(self, api_key: Optional[str], timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "sendgrid"

    def send(self, request: EmailRequest) -> OperationResult:
        if not self.api_key:
            return OperationResult.permanent_error(
                "EMAIL_API_KEY is not configured for sendgrid",
                error_code="MISSING_CREDENTIALS",
            )

        try:
            response = requests.post(
                SENDGRID_API_URL,
                json=build_sendgrid_payload(request),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            result = classify_http_error(exc, provider="sendgrid")
            logger.error(
                "sendgrid_send_failed",
                error=result.message,
                error_code=result.error_code,
            )
            return result

        message_id = response.headers.get("X-Message-Id")
        logger.info("sendgrid_email_sent", message_id=message_id)
        return OperationResult.success(
            data={"message_id": message_id}, message="Email sent via SendGrid"
        )
