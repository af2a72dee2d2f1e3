"""Unit tests for alert system wiring."""

import pytest

from modules.alerts import init_alert_system


@pytest.mark.unit
class TestInitAlertSystem:
    """Tests for init_alert_system()."""

    def test_attaches_all_enabled_observers(self, settings_factory):
        system = init_alert_system(settings_factory())
        try:
            ids = [o.id for o in system.dispatcher.get_observers()]
        finally:
            system.close()

        assert ids == [
            "email-observer",
            "push-observer",
            "in-app-observer",
            "browser-observer",
        ]

    def test_disabled_observers_are_skipped(self, settings_factory):
        settings = settings_factory(
            alerts={"ALERTS_ENABLE_PUSH": False, "ALERTS_ENABLE_BROWSER": False}
        )
        system = init_alert_system(settings)
        try:
            ids = [o.id for o in system.dispatcher.get_observers()]
        finally:
            system.close()

        assert ids == ["email-observer", "in-app-observer"]

    def test_unknown_provider_skips_only_that_observer(self, settings_factory):
        settings = settings_factory(email={"EMAIL_PROVIDER": "carrier-pigeon"})
        system = init_alert_system(settings)
        try:
            ids = [o.id for o in system.dispatcher.get_observers()]
        finally:
            system.close()

        assert "email-observer" not in ids
        assert "push-observer" in ids

    def test_uses_given_session_registry_and_settings(
        self, settings_factory, session_registry
    ):
        settings = settings_factory(
            alerts={"ALERTS_OBSERVER_TIMEOUT_SECONDS": 3, "ALERTS_MAX_WORKERS": 2}
        )
        system = init_alert_system(settings, sessions=session_registry)
        try:
            assert system.sessions is session_registry
            assert system.dispatcher.observer_timeout_seconds == 3
            assert system.dispatcher.max_workers == 2
            assert system.helpers.dispatcher is system.dispatcher
        finally:
            system.close()
