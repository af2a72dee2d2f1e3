"""Fixtures for API tests: the real routers over test doubles."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter, setup_rate_limiter
from api.router import api_router
from infrastructure.services.providers import (
    get_alert_dispatcher,
    get_session_registry,
    get_settings,
)


@pytest.fixture
def api_settings(settings_factory):
    return settings_factory(GIT_SHA="abc123")


@pytest.fixture
def api_app(dispatcher, session_registry, api_settings):
    """FastAPI app with the service routers and overridden providers."""
    app = FastAPI()
    setup_rate_limiter(app)
    app.include_router(api_router)
    app.dependency_overrides[get_alert_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_session_registry] = lambda: session_registry
    app.dependency_overrides[get_settings] = lambda: api_settings
    get_limiter().reset()
    yield app
    app.dependency_overrides.clear()
    get_limiter().reset()


@pytest.fixture
def client(api_app):
    return TestClient(api_app)
