"""
Redis-backed read-through store for upstream results.
"""

from __future__ import annotations

import json
import time
from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger

from service_breeds.app.domain.models import UpstreamResult

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


Producer = Callable[[], Awaitable[UpstreamResult]]


def cache_key(endpoint: str) -> str:
    """Flatten an endpoint path into a store key: ``breed/hound/images`` -> ``breed.hound.images``."""
    return endpoint.strip("/").replace("/", ".")


class CacheStore:
    """Compute-once, reuse-until-stale store keyed by flattened endpoint path.

    Entries carry their own ``expires_at``; a read at or after that instant is
    a miss and the producer runs again. The same lifetime is handed to Redis
    as the key TTL. Concurrent misses on one key are not coalesced.
    """

    def __init__(
        self,
        redis_url: str,
        *,
        namespace: str = "gateway",
        clock: Callable[[], float] = time.time,
        metrics: Optional["MetricsCollector"] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.redis_url = redis_url
        self.namespace = namespace
        self.metrics = metrics
        self.logger = get_logger("gateway.cache_store")
        self._clock = clock
        self.redis = client if client is not None else redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )

    async def close(self) -> None:
        """Close Redis connections."""
        await self.redis.aclose()

    async def ping(self) -> bool:
        """Return True when Redis responds to a ping."""
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as exc:
            self.logger.error("Redis health check failed", error=str(exc))
            return False

    async def store_and_return(self, key: str, ttl_minutes: int, producer: Producer) -> UpstreamResult:
        """Return the live entry for ``key`` or run ``producer`` once and store its result."""
        storage_key = self._storage_key(key)

        cached = await self._read(storage_key)
        if cached is not None:
            self.logger.debug("Cache hit", key=key)
            self._record("cache_hits_total", key)
            return cached

        self.logger.debug("Cache miss", key=key)
        self._record("cache_misses_total", key)

        value = await producer()
        await self._write(storage_key, key, value, ttl_minutes)
        return value

    async def _read(self, storage_key: str) -> Optional[UpstreamResult]:
        try:
            raw = await self.redis.get(storage_key)
        except (RedisError, OSError) as exc:
            self.logger.error("Redis read failed", key=storage_key, error=str(exc))
            return None

        if not raw:
            return None

        try:
            entry = json.loads(raw)
            expires_at = float(entry["expires_at"])
            value = UpstreamResult.from_dict(entry["value"])
        except (ValueError, KeyError, TypeError):
            self.logger.warning("Discarding malformed cache entry", key=storage_key)
            return None

        if self._clock() >= expires_at:
            return None
        return value

    async def _write(self, storage_key: str, key: str, value: UpstreamResult, ttl_minutes: int) -> None:
        ttl_seconds = max(1, int(ttl_minutes * 60))
        entry = {
            "key": key,
            "value": value.to_dict(),
            "expires_at": self._clock() + ttl_seconds,
        }
        try:
            await self.redis.set(storage_key, json.dumps(entry), ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            self.logger.error("Redis write failed", key=storage_key, error=str(exc))

    def _storage_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _record(self, metric_name: str, key: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, cache_type=key.split(".")[0])
