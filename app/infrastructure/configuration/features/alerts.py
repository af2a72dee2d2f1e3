"""Alert dispatch feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class AlertsSettings(FeatureSettings):
    """Alert dispatcher configuration.

    Environment Variables:
        ALERTS_OBSERVER_TIMEOUT_SECONDS: Per-channel delivery timeout (default: 30)
        ALERTS_MAX_WORKERS: Size of the fan-out worker pool (default: 8)
        ALERTS_ENABLE_EMAIL: Attach the email observer (default: True)
        ALERTS_ENABLE_PUSH: Attach the push observer (default: True)
        ALERTS_ENABLE_IN_APP: Attach the in-app observer (default: True)
        ALERTS_ENABLE_BROWSER: Attach the browser observer (default: True)
        ALERTS_HISTORY_RETENTION_DAYS: Age after which alerts are purged (default: 30)
        ALERTS_SCHEDULER_INTERVAL_SECONDS: How often due alerts are dispatched (default: 30)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.alerts.enable_push:
            # Attach push observer...
        ```
    """

    observer_timeout_seconds: float = Field(
        default=30.0,
        alias="ALERTS_OBSERVER_TIMEOUT_SECONDS",
        description="Seconds to wait for a single observer before failing its channels",
    )
    max_workers: int = Field(
        default=8,
        alias="ALERTS_MAX_WORKERS",
        description="Calls a single observer may have in flight before new ones fail fast",
    )
    enable_email: bool = Field(default=True, alias="ALERTS_ENABLE_EMAIL")
    enable_push: bool = Field(default=True, alias="ALERTS_ENABLE_PUSH")
    enable_in_app: bool = Field(default=True, alias="ALERTS_ENABLE_IN_APP")
    enable_browser: bool = Field(default=True, alias="ALERTS_ENABLE_BROWSER")
    history_retention_days: int = Field(
        default=30,
        alias="ALERTS_HISTORY_RETENTION_DAYS",
        description="Alerts older than this are removed by the retention job",
    )
    scheduler_interval_seconds: int = Field(
        default=30,
        alias="ALERTS_SCHEDULER_INTERVAL_SECONDS",
        description="Polling interval of the due-alert dispatch job",
    )
