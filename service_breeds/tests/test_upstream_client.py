"""
Tests for the catalog API client.
"""

import httpx
import pytest

from shared.errors import UpstreamUnavailable
from shared.metrics import MetricsCollector
from service_breeds.app.adapters.upstream_client import UpstreamClient

from conftest import UPSTREAM_BASE, make_upstream


@pytest.mark.asyncio
async def test_get_concatenates_base_url_and_returns_result(catalog):
    client = make_upstream(catalog)

    result = await client.get("breeds/list")

    assert client.url_for("breeds/list") == "https://upstream.test/api/breeds/list"
    assert catalog.requests == ["breeds/list"]
    assert result.status == 200
    assert '"hound"' in result.body
    assert result.header("cache-control") == "max-age=3600"


@pytest.mark.asyncio
async def test_client_errors_are_returned_not_raised(catalog):
    client = make_upstream(catalog)

    result = await client.get("breed/unknown/images")

    assert result.status == 404
    assert "Breed not found" in result.body


@pytest.mark.asyncio
async def test_repeated_headers_keep_every_value():
    def handler(request):
        return httpx.Response(
            200,
            text="{}",
            headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Cache-Control", "no-cache")],
        )

    result = await make_upstream(handler).get("breeds/list")

    assert result.headers["set-cookie"] == ("a=1", "b=2")
    assert result.header("Cache-Control") == "no-cache"


@pytest.mark.asyncio
async def test_server_errors_raise_upstream_unavailable():
    metrics = MetricsCollector("gateway")
    client = UpstreamClient(
        UPSTREAM_BASE,
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="maintenance")),
        metrics=metrics,
    )

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await client.get("breeds/list")

    assert exc_info.value.endpoint == "breeds/list"
    assert exc_info.value.details["status_code"] == 503
    assert metrics.registry.get_sample_value(
        "upstream_requests_total", {"outcome": "server_error"}
    ) == 1.0


@pytest.mark.asyncio
async def test_transport_failures_raise_upstream_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await make_upstream(handler).get("breeds/list")

    assert "connection refused" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
