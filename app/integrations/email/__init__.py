"""Email transport integration.

One EmailService in front of three interchangeable backends: SMTP relay,
SendGrid and Resend.
"""

from integrations.email.base import EmailAttachment, EmailBackend, EmailRequest
from integrations.email.service import (
    EmailService,
    build_email_backend,
    build_email_service,
    render_template,
)
from integrations.email.smtp import SmtpBackend
from integrations.email.sendgrid import SendGridBackend
from integrations.email.resend import ResendBackend

__all__ = [
    "EmailAttachment",
    "EmailBackend",
    "EmailRequest",
    "EmailService",
    "ResendBackend",
    "SendGridBackend",
    "SmtpBackend",
    "build_email_backend",
    "build_email_service",
    "render_template",
]
