"""Infrastructure configuration module - public API.

Centralized configuration for the alert dispatch service using Pydantic
BaseSettings, organized by domain.

Exports:
    Settings: Main settings class (for testing/overrides)
    EmailSettings, PushSettings, AlertsSettings: Section classes

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    provider = settings.push.PUSH_PROVIDER
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.integrations import EmailSettings, PushSettings
from infrastructure.configuration.features import AlertsSettings

__all__ = ["Settings", "EmailSettings", "PushSettings", "AlertsSettings"]
