"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from integrations.realtime import SessionRegistry
from modules.alerts import AlertDispatcher, AlertHelpers, AlertSystem, init_alert_system


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def get_version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_session_registry() -> SessionRegistry:
    """Get the application-scoped registry of connected realtime sessions."""
    return SessionRegistry()


@lru_cache
def get_alert_system() -> AlertSystem:
    """
    Get the application-scoped alert system singleton.

    The dispatcher, its observers and the session registry they publish to
    are built once per process from settings.

    Returns:
        AlertSystem: Dispatcher, helpers and session registry.
    """
    return init_alert_system(get_settings(), sessions=get_session_registry())


def get_alert_dispatcher() -> AlertDispatcher:
    """
    Get the alert dispatcher of the application alert system.

    Usage:
        @router.post("/alerts/{alert_id}/retry")
        def retry(alert_id: str, dispatcher: AlertDispatcherDep):
            return dispatcher.retry(alert_id)
    """
    return get_alert_system().dispatcher


def get_alert_helpers() -> AlertHelpers:
    return get_alert_system().helpers
