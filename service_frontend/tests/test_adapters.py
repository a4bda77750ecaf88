"""
Tests for the evaluation and metrics HTTP clients.
"""

import json
import httpx
import pytest

from edge_shared.errors import ExternalServiceError
from service_frontend.app.adapters import EvaluationClient, MetricsClient
from service_frontend.app.context import EvaluationContext
from service_frontend.app.identity import CallerIdentity


@pytest.fixture
def identity():
    return CallerIdentity(username="web:production", environment="production", projects=("web",))


@pytest.fixture
def context():
    return EvaluationContext(environment="production", remote_address="1.2.3.4", fields={"userId": "7"})


def _transport(handler, seen):
    def _handle(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)
    return httpx.MockTransport(_handle)


class TestEvaluationClient:
    """Test cases for EvaluationClient."""

    @pytest.mark.asyncio
    async def test_get_features(self, identity, context):
        seen = []
        toggles = [{"name": "a", "enabled": True, "variant": {"name": "disabled", "enabled": False}}]
        client = EvaluationClient(
            "http://evaluation:4242/",
            transport=_transport(lambda r: httpx.Response(200, json={"toggles": toggles}), seen),
        )

        result = await client.get_features(identity, context)
        await client.close()

        assert result == toggles
        assert str(seen[0].url) == "http://evaluation:4242/api/frontend/evaluate"
        assert json.loads(seen[0].content) == {
            "environment": "production",
            "projects": ["web"],
            "context": {"userId": "7", "remoteAddress": "1.2.3.4", "environment": "production"},
        }

    @pytest.mark.asyncio
    async def test_http_error(self, identity, context):
        client = EvaluationClient(
            "http://evaluation:4242",
            transport=_transport(lambda r: httpx.Response(503), []),
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get_features(identity, context)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_connection_error(self, identity, context):
        def _fail(request):
            raise httpx.ConnectError("refused", request=request)

        client = EvaluationClient("http://evaluation:4242", transport=httpx.MockTransport(_fail))

        with pytest.raises(ExternalServiceError):
            await client.get_features(identity, context)

    @pytest.mark.asyncio
    async def test_missing_toggles(self, identity, context):
        client = EvaluationClient(
            "http://evaluation:4242",
            transport=_transport(lambda r: httpx.Response(200, json={"features": []}), []),
        )

        with pytest.raises(ExternalServiceError):
            await client.get_features(identity, context)

    @pytest.mark.asyncio
    async def test_invalid_json(self, identity, context):
        client = EvaluationClient(
            "http://evaluation:4242",
            transport=_transport(lambda r: httpx.Response(200, content=b"<html>"), []),
        )

        with pytest.raises(ExternalServiceError):
            await client.get_features(identity, context)


class TestMetricsClient:
    """Test cases for MetricsClient."""

    @pytest.mark.asyncio
    async def test_register_metrics(self, identity):
        seen = []
        client = MetricsClient(
            "http://metrics:4242",
            transport=_transport(lambda r: httpx.Response(202), seen),
        )
        metrics = {"appName": "web", "bucket": {"toggles": {}}}

        await client.register_metrics(identity, metrics, "1.2.3.4")
        await client.close()

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/frontend/metrics"
        assert json.loads(seen[0].content) == {
            "environment": "production",
            "sourceAddress": "1.2.3.4",
            "metrics": metrics,
        }

    @pytest.mark.asyncio
    async def test_register_metrics_failure(self, identity):
        client = MetricsClient(
            "http://metrics:4242",
            transport=_transport(lambda r: httpx.Response(500), []),
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.register_metrics(identity, {}, None)

        assert exc_info.value.message.startswith("metrics:")
