"""Unit tests for the settings aggregator and its sections."""

import pytest

from infrastructure.configuration import (
    AlertsSettings,
    EmailSettings,
    PushSettings,
    Settings,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "PREFIX",
        "EMAIL_PROVIDER",
        "PUSH_PROVIDER",
        "ALERTS_OBSERVER_TIMEOUT_SECONDS",
        "ALERTS_ENABLE_PUSH",
        "SMTP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestSectionDefaults:
    """Tests for default values of every section."""

    def test_email_defaults(self, clean_env):
        settings = EmailSettings(_env_file=None)

        assert settings.EMAIL_PROVIDER == "smtp"
        assert settings.SMTP_PORT == 587
        assert settings.SMTP_SECURE is False
        assert settings.EMAIL_API_KEY is None

    def test_push_defaults(self, clean_env):
        settings = PushSettings(_env_file=None)

        assert settings.PUSH_PROVIDER == "firebase"
        assert settings.ONESIGNAL_APP_ID is None

    def test_alerts_defaults(self, clean_env):
        settings = AlertsSettings(_env_file=None)

        assert settings.observer_timeout_seconds == 30.0
        assert settings.max_workers == 8
        assert settings.enable_email and settings.enable_push
        assert settings.enable_in_app and settings.enable_browser
        assert settings.history_retention_days == 30
        assert settings.scheduler_interval_seconds == 30


@pytest.mark.unit
class TestEnvironmentLoading:
    """Tests for values read from the environment."""

    def test_alerts_read_aliases(self, clean_env):
        clean_env.setenv("ALERTS_OBSERVER_TIMEOUT_SECONDS", "2.5")
        clean_env.setenv("ALERTS_ENABLE_PUSH", "false")

        settings = AlertsSettings(_env_file=None)

        assert settings.observer_timeout_seconds == 2.5
        assert settings.enable_push is False

    def test_integrations_read_env(self, clean_env):
        clean_env.setenv("EMAIL_PROVIDER", "resend")
        clean_env.setenv("SMTP_PORT", "465")
        clean_env.setenv("PUSH_PROVIDER", "expo")

        assert EmailSettings(_env_file=None).EMAIL_PROVIDER == "resend"
        assert EmailSettings(_env_file=None).SMTP_PORT == 465
        assert PushSettings(_env_file=None).PUSH_PROVIDER == "expo"

    def test_env_names_are_case_sensitive(self, clean_env):
        clean_env.setenv("email_provider", "resend")

        assert EmailSettings(_env_file=None).EMAIL_PROVIDER == "smtp"


@pytest.mark.unit
class TestSettingsAggregator:
    """Tests for the main Settings object."""

    def test_builds_every_section(self, settings_factory):
        settings = settings_factory()

        assert isinstance(settings.email, EmailSettings)
        assert isinstance(settings.push, PushSettings)
        assert isinstance(settings.alerts, AlertsSettings)

    def test_explicit_sections_are_kept(self, settings_factory):
        settings = settings_factory(alerts={"ALERTS_MAX_WORKERS": 2})

        assert settings.alerts.max_workers == 2

    @pytest.mark.parametrize("prefix,expected", [("", True), ("dev-", False)])
    def test_is_production(self, settings_factory, prefix, expected):
        settings = settings_factory(PREFIX=prefix)

        assert settings.is_production is expected

    def test_default_sections_without_overrides(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "INFO"
        assert settings.GIT_SHA == "Unknown"
        assert settings.alerts.enable_email is True
