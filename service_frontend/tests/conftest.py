"""
Shared fixtures for frontend gateway tests.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from edge_shared.config import get_config
from service_frontend.app.main import create_app

FRONTEND_TOKEN = "*:production.4bc1e9a3f0"
DEV_TOKEN = "default:development.77aa0c"


@pytest.fixture
def toggles():
    return [
        {
            "name": "new-checkout",
            "enabled": True,
            "variant": {"name": "blue", "enabled": True, "payload": {"type": "string", "value": "b"}},
            "impressionData": True,
        },
        {
            "name": "dark-mode",
            "enabled": True,
            "variant": {"name": "disabled", "enabled": False},
            "impressionData": False,
        },
    ]


@pytest.fixture
def evaluation_service(toggles):
    service = MagicMock()
    service.get_features = AsyncMock(return_value=toggles)
    return service


@pytest.fixture
def metrics_service():
    service = MagicMock()
    service.register_metrics = AsyncMock(return_value=None)
    return service


@pytest.fixture
def make_config():
    def _make(**overrides):
        overrides.setdefault("frontend_api_tokens", [FRONTEND_TOKEN, DEV_TOKEN])
        return get_config("frontend", 8000, **overrides)
    return _make


@pytest.fixture
def make_client(make_config, evaluation_service, metrics_service):
    def _make(**overrides):
        app = create_app(
            make_config(**overrides),
            evaluation_service=evaluation_service,
            metrics_service=metrics_service,
        )
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": FRONTEND_TOKEN}


@pytest.fixture
def dev_auth_headers():
    return {"Authorization": f"Bearer {DEV_TOKEN}"}
