"""
Gateway orchestration: cached upstream reads, random selection and response shaping.
"""

from __future__ import annotations

import functools
import json
from typing import Dict, List, Optional, TYPE_CHECKING

from shared.errors import SelectionFailed
from shared.logging import get_logger

from service_breeds.app.adapters.upstream_client import UpstreamClient
from service_breeds.app.caching.cache_store import CacheStore, cache_key
from service_breeds.app.domain.models import (
    GatewayResponse,
    ImagePayload,
    ResponseOptions,
    Scalar,
    SUCCESS,
    UpstreamResult,
)
from service_breeds.app.sampling.sampler import Sampler
from service_breeds.app.transform.transformer import ResponseTransformer

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_MAX_RANDOM_IMAGES = 50


class GatewayOrchestrator:
    """One method per gateway route.

    Every operation resolves cached upstream data, optionally samples it,
    and hands the result to the transformer. ``ttl_minutes`` is resolved by
    the caller from configuration.
    """

    def __init__(
        self,
        cache_store: CacheStore,
        upstream: UpstreamClient,
        *,
        ttl_minutes: int,
        sampler: Optional[Sampler] = None,
        transformer: Optional[ResponseTransformer] = None,
        max_random_images: int = DEFAULT_MAX_RANDOM_IMAGES,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.cache_store = cache_store
        self.upstream = upstream
        self.ttl_minutes = ttl_minutes
        self.sampler = sampler or Sampler()
        self.transformer = transformer or ResponseTransformer()
        self.max_random_images = max_random_images
        self.metrics = metrics
        self.logger = get_logger("gateway.orchestrator")

    async def cache_endpoint(self, endpoint: str) -> UpstreamResult:
        """Read an endpoint through the cache, fetching upstream on a miss."""
        return await self.cache_store.store_and_return(
            cache_key(endpoint),
            self.ttl_minutes,
            functools.partial(self.upstream.get, endpoint),
        )

    async def breed_list(self, options: ResponseOptions = ResponseOptions()) -> GatewayResponse:
        return self._respond(await self.cache_endpoint("breeds/list"), options)

    async def breed_list_all(self, options: ResponseOptions = ResponseOptions()) -> GatewayResponse:
        return self._respond(await self.cache_endpoint("breeds/list/all"), options)

    async def breed_list_sub(self, breed: str, options: ResponseOptions = ResponseOptions()) -> GatewayResponse:
        return self._respond(await self.cache_endpoint(f"breed/{breed}/list"), options)

    async def breed_text(
        self,
        breed: str,
        sub_breed: Optional[str] = None,
        options: ResponseOptions = ResponseOptions(),
    ) -> GatewayResponse:
        """Breed (or sub-breed) metadata."""
        return self._respond(await self.cache_endpoint(self._breed_path(breed, sub_breed)), options)

    async def breed_all_random_image(self, options: ResponseOptions = ResponseOptions()) -> GatewayResponse:
        """One random image from any breed, as a scalar message."""
        return await self.breed_all_random_images(1, options, single=True)

    async def breed_all_random_images(
        self,
        amount: int = 0,
        options: ResponseOptions = ResponseOptions(),
        *,
        single: bool = False,
    ) -> GatewayResponse:
        """Random images across all breeds: pick a breed, then an image of that breed, ``amount`` times."""
        if single:
            amount = 1
        else:
            amount = min(max(int(amount), 0), self.max_random_images)
            if amount == 0:
                return await self.breed_all_random_image(options)

        all_breeds = await self.cache_endpoint("breeds/list")
        # breed -> image list, fetched at most once per call
        breed_images: Dict[str, UpstreamResult] = {}
        images: List[str] = []

        for _ in range(amount):
            try:
                breed = self._pick_scalar(all_breeds)
            except SelectionFailed as exc:
                self.logger.warning("Breed list cannot be sampled", error=exc.message)
                return self._respond(all_breeds, options)

            image = await self._random_image_for_breed(breed, breed_images)
            if image is not None:
                images.append(image)

        if not images:
            return self._respond(self._synthetic_error("No images available", 404), options)

        message = images[0] if single else images
        result = UpstreamResult(
            status=200,
            body=json.dumps({"status": SUCCESS, "message": message}, separators=(",", ":")),
        )
        return self._respond(result, options)

    async def breed_image(
        self,
        breed: str,
        sub_breed: Optional[str] = None,
        *,
        include_all: bool = False,
        amount: int = 0,
        options: ResponseOptions = ResponseOptions(),
    ) -> GatewayResponse:
        """Images of a breed: the full list, or a random selection of ``amount``."""
        endpoint = self._breed_path(breed, sub_breed)
        all_images = await self.cache_endpoint(f"{endpoint}/images")

        if include_all:
            return self._respond(all_images, options)

        try:
            selection = self.sampler.select(all_images, amount)
        except SelectionFailed as exc:
            self.logger.info("Falling back to upstream random endpoint", endpoint=endpoint, reason=exc.message)
            self._record_fallback("breed_image")
            return self._respond(await self.upstream.get(f"{endpoint}/images/random"), options)

        return self._respond(selection, options)

    async def _random_image_for_breed(self, breed: str, breed_images: Dict[str, UpstreamResult]) -> Optional[str]:
        if breed not in breed_images:
            breed_images[breed] = await self.cache_endpoint(f"breed/{breed}/images")

        try:
            return self._pick_scalar(breed_images[breed])
        except SelectionFailed as exc:
            self.logger.info("Falling back to upstream random endpoint", breed=breed, reason=exc.message)
            self._record_fallback("all_breeds")

        fallback = await self.upstream.get(f"breed/{breed}/images/random")
        try:
            payload = ImagePayload.decode(fallback.body)
        except ValueError:
            return None
        if payload.succeeded and isinstance(payload.message, Scalar):
            return payload.message.value
        return None

    def _pick_scalar(self, result: UpstreamResult) -> str:
        selection = self.sampler.select(result, 0)
        return ImagePayload.decode(selection.body).message.raw()

    def _respond(self, result: UpstreamResult, options: ResponseOptions) -> GatewayResponse:
        return self.transformer.respond(result, options)

    @staticmethod
    def _breed_path(breed: str, sub_breed: Optional[str]) -> str:
        if sub_breed:
            return f"breed/{breed}/{sub_breed}"
        return f"breed/{breed}"

    @staticmethod
    def _synthetic_error(message: str, status: int) -> UpstreamResult:
        body = json.dumps({"status": "error", "message": message, "code": status}, separators=(",", ":"))
        return UpstreamResult(status=status, body=body)

    def _record_fallback(self, endpoint_type: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("selection_fallbacks_total", endpoint_type=endpoint_type)
