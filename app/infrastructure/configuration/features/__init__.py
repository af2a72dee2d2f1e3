"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.alerts import AlertsSettings

__all__ = [
    "AlertsSettings",
]
