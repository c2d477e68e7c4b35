"""
Shared fixtures for gateway tests.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from service_breeds.app.adapters.upstream_client import UpstreamClient
from service_breeds.app.caching.cache_store import CacheStore
from service_breeds.app.domain.models import UpstreamResult

UPSTREAM_BASE = "https://upstream.test/api/"

HOUND_IMAGES = [
    "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg",
    "https://images.dog.ceo/breeds/hound-basset/n02088238_10005.jpg",
    "https://images.dog.ceo/breeds/hound-blood/n02088466_10083.jpg",
]


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the store makes."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingUpstream:
    """httpx handler serving canned JSON per endpoint path and recording every request."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requests: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        endpoint = request.url.path[len("/api/"):]
        self.requests.append(endpoint)
        route = self.routes.get(endpoint)
        if route is None:
            return httpx.Response(404, json={"status": "error", "message": "Breed not found", "code": 404})
        if isinstance(route, httpx.Response):
            return route
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route, headers={"cache-control": "max-age=3600"})

    def count(self, endpoint: str) -> int:
        return self.requests.count(endpoint)


def success(message: Any) -> Dict[str, Any]:
    return {"status": "success", "message": message}


def json_result(payload: Any, status: int = 200, headers: Optional[Dict[str, tuple]] = None) -> UpstreamResult:
    return UpstreamResult(status=status, body=json.dumps(payload), headers=headers or {})


def make_upstream(handler: Callable[[httpx.Request], httpx.Response]) -> UpstreamClient:
    return UpstreamClient(UPSTREAM_BASE, transport=httpx.MockTransport(handler))


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(fake_redis, clock):
    return CacheStore("redis://unused", clock=clock, client=fake_redis)


@pytest.fixture
def catalog():
    """Upstream catalog with two breeds, one of which has sub-breeds."""
    return RecordingUpstream({
        "breeds/list": success(["hound", "pug"]),
        "breeds/list/all": success({"hound": ["afghan", "basset", "blood"], "pug": []}),
        "breed/hound/list": success(["afghan", "basset", "blood"]),
        "breed/hound/images": success(HOUND_IMAGES),
        "breed/hound/images/random": success(HOUND_IMAGES[0]),
        "breed/hound/afghan/images": success(HOUND_IMAGES[:1]),
        "breed/pug/images": success(["https://images.dog.ceo/breeds/pug/n02110958_1975.jpg"]),
        "breed/hound": success({"name": "Hound", "description": "Scent hunters"}),
    })
