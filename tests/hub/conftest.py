"""Shared fixtures for the API test suite."""

import pytest
from fastapi.testclient import TestClient

from wattcast.engine.config import AppConfig, ForecastConfig, ServerConfig
from wattcast.hub.api import create_api


@pytest.fixture
def api_config():
    return AppConfig(forecast=ForecastConfig(seed=7), server=ServerConfig(api_key=""))


@pytest.fixture
def api_client(api_config):
    """Create a FastAPI TestClient for the forecast API."""
    return TestClient(create_api(api_config))
