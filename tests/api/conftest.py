"""Fixtures for API tests"""
import pytest
from starlette.testclient import TestClient

from mindwell.api.middleware import limiter
from mindwell.api.server import app
from mindwell.db.store import ProgressStore
from mindwell.services import init_container, reset_container


@pytest.fixture
def api_store():
    return ProgressStore()


@pytest.fixture
def client(monkeypatch, api_store, test_api_key):
    """Test client with a fresh in-memory store and a configured API key"""
    monkeypatch.setenv("API_KEYS", f"{test_api_key},second_key")
    init_container(api_store)
    limiter.reset()

    yield TestClient(app)

    reset_container()


@pytest.fixture
def headers(test_api_key):
    return {"Authorization": f"Bearer {test_api_key}"}
