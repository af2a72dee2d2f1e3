"""Push notification provider settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class PushSettings(IntegrationSettings):
    """Push provider configuration.

    Environment Variables:
        PUSH_PROVIDER: 'firebase', 'onesignal' or 'expo' (default: firebase)
        PUSH_API_KEY: Server key (firebase) or REST API key (onesignal)
        ONESIGNAL_APP_ID: OneSignal application id
        PUSH_TIMEOUT_SECONDS: HTTP timeout for provider calls (default: 10)
    """

    PUSH_PROVIDER: str = Field(default="firebase", alias="PUSH_PROVIDER")
    PUSH_API_KEY: str | None = Field(default=None, alias="PUSH_API_KEY")
    ONESIGNAL_APP_ID: str | None = Field(default=None, alias="ONESIGNAL_APP_ID")
    PUSH_TIMEOUT_SECONDS: float = Field(default=10.0, alias="PUSH_TIMEOUT_SECONDS")
