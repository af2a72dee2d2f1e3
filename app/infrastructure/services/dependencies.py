"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.services.providers import (
    get_alert_dispatcher,
    get_alert_helpers,
    get_session_registry,
    get_settings,
)
from integrations.realtime import SessionRegistry
from modules.alerts import AlertDispatcher, AlertHelpers

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Alert dispatcher dependency - create, retry, cancel and inspect alerts
AlertDispatcherDep = Annotated[AlertDispatcher, Depends(get_alert_dispatcher)]

# Domain helpers (reservation_confirmed, slot_released, ...)
AlertHelpersDep = Annotated[AlertHelpers, Depends(get_alert_helpers)]

# Realtime sessions that in-app and browser observers publish to
SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]

__all__ = [
    "SettingsDep",
    "AlertDispatcherDep",
    "AlertHelpersDep",
    "SessionRegistryDep",
]
