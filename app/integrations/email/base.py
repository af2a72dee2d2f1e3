"""Email transport contract and message model."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from infrastructure.operations import OperationResult


class EmailAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class EmailRequest(BaseModel):
    """A single outgoing email.

    Attributes:
        to: Recipient addresses (at least one)
        subject: Subject line
        text: Plain text body
        html: HTML body
        cc, bcc: Additional recipients
        reply_to: Reply-To address
        from_address, from_name: Sender, defaults to the configured sender
        attachments: File attachments

    Either ``text`` or ``html`` must be present.
    """

    to: List[str] = Field(default_factory=list)
    subject: str = ""
    text: Optional[str] = None
    html: Optional[str] = None
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    reply_to: Optional[str] = None
    from_address: Optional[str] = None
    from_name: Optional[str] = None
    attachments: List[EmailAttachment] = Field(default_factory=list)

    @property
    def sender(self) -> str:
        if self.from_name:
            return f"{self.from_name} <{self.from_address}>"
        return self.from_address or ""


class EmailBackend(ABC):
    """Abstract base class for email backends (SMTP, SendGrid, Resend).

    Backends receive already validated requests with the sender filled in.
    They must report failures as error OperationResults rather than raise.
    On success ``data`` holds ``{"message_id": ...}``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier used in logs and result metadata."""
        pass

    @abstractmethod
    def send(self, request: EmailRequest) -> OperationResult:
        pass
