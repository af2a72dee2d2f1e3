from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server import lifespan as lifespan_module


@pytest.fixture
def alert_system():
    system = MagicMock()
    system.dispatcher.get_observers.return_value = []
    return system


@pytest.mark.unit
def test_lifespan_builds_and_closes_alert_system(alert_system, settings_factory):
    app = FastAPI(lifespan=lifespan_module.lifespan)
    settings = settings_factory()

    with patch.object(
        lifespan_module, "get_alert_system", return_value=alert_system
    ), patch.object(lifespan_module, "get_settings", return_value=settings):
        with TestClient(app):
            assert app.state.alert_system is alert_system
            assert app.state.settings is settings
            # scheduled tasks never start under pytest
            assert app.state.scheduled_stop_event is None
            alert_system.close.assert_not_called()

    alert_system.close.assert_called_once()


@pytest.mark.unit
@patch.object(lifespan_module, "_is_test_environment", return_value=False)
@patch.object(lifespan_module, "scheduled_tasks")
def test_start_scheduled_tasks_outside_tests(scheduled_tasks_mock, _is_test, settings_factory):
    dispatcher = MagicMock()
    settings = settings_factory()
    stop_event = MagicMock()
    scheduled_tasks_mock.run_continuously.return_value = stop_event

    result = lifespan_module._start_scheduled_tasks(dispatcher, settings, MagicMock())

    scheduled_tasks_mock.init.assert_called_once_with(dispatcher, settings)
    assert result is stop_event


@pytest.mark.unit
def test_stop_scheduled_tasks():
    stop_event = MagicMock()

    lifespan_module._stop_scheduled_tasks(stop_event)
    lifespan_module._stop_scheduled_tasks(None)

    stop_event.set.assert_called_once()


@pytest.mark.unit
def test_list_configs_logs_sections(settings_factory):
    logger = MagicMock()

    lifespan_module._list_configs(settings_factory(), logger)

    loaded = [
        c.kwargs["config_setting"]
        for c in logger.info.call_args_list
        if c.args[0] == "configuration_loaded"
    ]
    assert sorted(loaded) == ["alerts", "email", "push"]
