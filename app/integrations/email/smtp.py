"""SMTP email backend."""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_smtp_error
from integrations.email.base import EmailBackend, EmailRequest

logger = get_module_logger()


def build_mime_message(request: EmailRequest) -> EmailMessage:
    """Build a MIME message with a plain text part and an HTML alternative."""
    msg = EmailMessage()
    msg["Subject"] = request.subject
    msg["From"] = request.sender
    msg["To"] = ", ".join(request.to)
    if request.cc:
        msg["Cc"] = ", ".join(request.cc)
    if request.reply_to:
        msg["Reply-To"] = request.reply_to
    domain = (request.from_address or "localhost").rpartition("@")[2] or None
    msg["Message-ID"] = make_msgid(domain=domain)

    if request.text is not None:
        msg.set_content(request.text)
        if request.html:
            msg.add_alternative(request.html, subtype="html")
    else:
        msg.set_content(request.html or "", subtype="html")

    for attachment in request.attachments:
        maintype, _, subtype = attachment.content_type.partition("/")
        msg.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return msg


class SmtpBackend(EmailBackend):
    """Delivers through an SMTP relay.

    Uses implicit TLS when ``secure`` is set, otherwise upgrades the plain
    connection with STARTTLS. Logs in only when both user and password are set.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        secure: bool = False,
        timeout: float = 10.0,
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.secure = secure
        self.timeout = timeout
        self._smtp_factory = smtp_factory

    @property
    def name(self) -> str:
        return "smtp"

    def send(self, request: EmailRequest) -> OperationResult:
        msg = build_mime_message(request)
        smtp_cls = self._smtp_factory or (
            smtplib.SMTP_SSL if self.secure else smtplib.SMTP
        )
        try:
            with smtp_cls(self.host, self.port, timeout=self.timeout) as smtp:
                if not self.secure:
                    smtp.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                # bcc stays off the headers but must reach the envelope
                smtp.send_message(
                    msg, to_addrs=[*request.to, *request.cc, *request.bcc]
                )
        except Exception as exc:
            result = classify_smtp_error(exc)
            logger.error(
                "smtp_send_failed",
                host=self.host,
                port=self.port,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        message_id = msg["Message-ID"]
        logger.info("smtp_email_sent", message_id=message_id, recipients=len(request.to))
        return OperationResult.success(
            data={"message_id": message_id}, message="Email sent via SMTP"
        )
