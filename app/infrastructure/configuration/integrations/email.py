"""Email transport settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class EmailSettings(IntegrationSettings):
    """Email transport configuration.

    Environment Variables:
        EMAIL_PROVIDER: Backend to use - 'smtp', 'sendgrid' or 'resend' (default: smtp)
        EMAIL_API_KEY: API key for the sendgrid and resend backends
        EMAIL_FROM_ADDRESS: Default sender address
        EMAIL_FROM_NAME: Default sender display name
        SMTP_HOST: SMTP relay host
        SMTP_PORT: SMTP relay port (default: 587)
        SMTP_SECURE: Use implicit TLS (SMTP_SSL) instead of STARTTLS
        SMTP_USER: SMTP login user
        SMTP_PASS: SMTP login password
        EMAIL_TIMEOUT_SECONDS: Network timeout for every backend (default: 10)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        provider = settings.email.EMAIL_PROVIDER
        sender = settings.email.EMAIL_FROM_ADDRESS
        ```
    """

    EMAIL_PROVIDER: str = Field(default="smtp", alias="EMAIL_PROVIDER")
    EMAIL_API_KEY: str | None = Field(default=None, alias="EMAIL_API_KEY")
    EMAIL_FROM_ADDRESS: str = Field(
        default="noreply@canchaya.com", alias="EMAIL_FROM_ADDRESS"
    )
    EMAIL_FROM_NAME: str = Field(default="CanchaYA", alias="EMAIL_FROM_NAME")
    SMTP_HOST: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_SECURE: bool = Field(default=False, alias="SMTP_SECURE")
    SMTP_USER: str | None = Field(default=None, alias="SMTP_USER")
    SMTP_PASS: str | None = Field(default=None, alias="SMTP_PASS")
    EMAIL_TIMEOUT_SECONDS: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")
