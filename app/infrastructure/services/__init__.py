"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    AlertDispatcherDep,
    AlertHelpersDep,
    SessionRegistryDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_alert_dispatcher,
    get_alert_helpers,
    get_alert_system,
    get_session_registry,
    get_settings,
)

__all__ = [
    "SettingsDep",
    "AlertDispatcherDep",
    "AlertHelpersDep",
    "SessionRegistryDep",
    "get_settings",
    "get_session_registry",
    "get_alert_system",
    "get_alert_dispatcher",
    "get_alert_helpers",
]
