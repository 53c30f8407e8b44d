"""Shared FastAPI TestClient for endpoint tests (startup hooks are not run)."""
import pytest
from fastapi.testclient import TestClient

from hedgeboard import main


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def api_prefix():
    return main.app_settings.API_V1_PREFIX
