"""
Breed image gateway service.
"""

import re
from typing import Awaitable, Dict, Optional

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import RouteNotResolved, UpstreamUnavailable

from service_breeds.app.adapters.upstream_client import UpstreamClient
from service_breeds.app.caching.cache_store import CacheStore
from service_breeds.app.domain.models import GatewayResponse, ResponseOptions
from service_breeds.app.domain.outcomes import NotFound, Ok, Outcome, Unavailable
from service_breeds.app.gateway.orchestrator import GatewayOrchestrator
from service_breeds.app.sampling.sampler import Sampler
from service_breeds.app.transform.transformer import ResponseTransformer


GENERIC_ERROR = "Error occurred"
IMAGE_TYPES = ("imageSingle", "imageMulti")

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def parse_amount(value: Optional[str]) -> int:
    """Leading digits as an integer; anything else is 0."""
    if value is None:
        return 0
    match = _LEADING_DIGITS.match(value)
    return int(match.group(1)) if match else 0


class GatewayService(BaseService):
    """Caching gateway in front of the dog image catalog API."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("gateway", 8000, config=config)

        self.upstream = UpstreamClient(
            self.config.upstream_base_url,
            timeout=self.config.upstream_timeout,
            metrics=self.metrics,
        )
        self.cache_store = CacheStore(self.config.redis_url, metrics=self.metrics)
        self.orchestrator = GatewayOrchestrator(
            self.cache_store,
            self.upstream,
            ttl_minutes=self.config.cache_ttl_minutes(),
            sampler=Sampler(),
            transformer=ResponseTransformer(),
            max_random_images=self.config.max_random_images,
            metrics=self.metrics,
        )
        self.logger.info(
            "Gateway configured",
            upstream=self.config.upstream_base_url,
            ttl_minutes=self.orchestrator.ttl_minutes,
            debug=self.config.debug,
        )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.orchestrator.upstream.close()
            await self.cache_store.close()

        self._setup_gateway_routes()
        self._setup_error_handlers()

        # Expose service instance via app state
        self.app.state.gateway_service = self

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"redis": "ok" if await self.cache_store.ping() else "error"}

    def _response_options(self, request: Request, type_tag: str) -> ResponseOptions:
        """Read the annotate and XML flags of a request."""
        alt = request.query_params.get("alt", "").lower() in ("1", "true", "yes")
        content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        xml = request.query_params.get("format", "").lower() == "xml" or content_type == "application/xml"
        return ResponseOptions(
            annotate=alt and type_tag in IMAGE_TYPES,
            xml=xml,
            type_tag=type_tag,
        )

    async def _dispatch(self, operation: Awaitable[GatewayResponse]) -> Outcome:
        try:
            return Ok(await operation)
        except UpstreamUnavailable as exc:
            self.logger.error("Upstream unavailable", code=exc.code, message=exc.message, details=exc.details)
            self.metrics.record_error(exc.code)
            return Unavailable(exc.message)

    def render(self, outcome: Outcome) -> Response:
        """Map a route outcome to the wire response."""
        if isinstance(outcome, Ok):
            return Response(
                content=outcome.response.content,
                status_code=outcome.response.status_code,
                headers=outcome.response.headers,
                media_type=outcome.response.media_type,
            )
        if isinstance(outcome, NotFound):
            return PlainTextResponse(outcome.message, status_code=404)
        # internal detail stays hidden unless debug mode is enabled
        detail = outcome.detail if self.config.debug else GENERIC_ERROR
        return PlainTextResponse(detail, status_code=500)

    def _render_unexpected_error(self, exc: Exception, request_id: Optional[str]) -> Response:
        return self.render(Unavailable(str(exc)))

    def _setup_error_handlers(self):
        """Route misses go through the outcome renderer."""

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            if exc.status_code != 404:
                return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

            if request.url.path == "/":
                return RedirectResponse(self.config.docs_url, status_code=302)

            error = RouteNotResolved(request.url.path)
            self.logger.info("Route not resolved", code=error.code, path=error.path)
            return self.render(NotFound(
                f"404 Error, page not found. API documentation is located at {self.config.docs_url}"
            ))

    def _setup_gateway_routes(self):
        """Set up catalog routes, most specific paths first."""
        orchestrator = self.orchestrator

        @self.app.get("/breeds/list")
        async def breed_list(request: Request):
            options = self._response_options(request, "breedOneDimensional")
            return self.render(await self._dispatch(orchestrator.breed_list(options)))

        @self.app.get("/breeds/list/all")
        async def breed_list_all(request: Request):
            options = self._response_options(request, "breedTwoDimensional")
            return self.render(await self._dispatch(orchestrator.breed_list_all(options)))

        @self.app.get("/breeds/image/random")
        async def breed_all_random_image(request: Request):
            options = self._response_options(request, "imageSingle")
            return self.render(await self._dispatch(orchestrator.breed_all_random_image(options)))

        @self.app.get("/breeds/image/random/{amount}")
        async def breed_all_random_images(request: Request, amount: str):
            options = self._response_options(request, "imageMulti")
            return self.render(await self._dispatch(
                orchestrator.breed_all_random_images(parse_amount(amount), options)
            ))

        @self.app.get("/breed/{breed}/list")
        async def breed_list_sub(request: Request, breed: str):
            options = self._response_options(request, "breedOneDimensional")
            return self.render(await self._dispatch(orchestrator.breed_list_sub(breed, options)))

        @self.app.get("/breed/{breed}/images")
        async def breed_images(request: Request, breed: str):
            options = self._response_options(request, "imageMulti")
            return self.render(await self._dispatch(
                orchestrator.breed_image(breed, include_all=True, options=options)
            ))

        @self.app.get("/breed/{breed}/images/random")
        async def breed_random_image(request: Request, breed: str):
            options = self._response_options(request, "imageSingle")
            return self.render(await self._dispatch(orchestrator.breed_image(breed, options=options)))

        @self.app.get("/breed/{breed}/images/random/{amount}")
        async def breed_random_images(request: Request, breed: str, amount: str):
            options = self._response_options(request, "imageMulti")
            return self.render(await self._dispatch(
                orchestrator.breed_image(breed, amount=parse_amount(amount), options=options)
            ))

        @self.app.get("/breed/{breed}/{sub_breed}/images")
        async def sub_breed_images(request: Request, breed: str, sub_breed: str):
            options = self._response_options(request, "imageMulti")
            return self.render(await self._dispatch(
                orchestrator.breed_image(breed, sub_breed, include_all=True, options=options)
            ))

        @self.app.get("/breed/{breed}/{sub_breed}/images/random")
        async def sub_breed_random_image(request: Request, breed: str, sub_breed: str):
            options = self._response_options(request, "imageSingle")
            return self.render(await self._dispatch(
                orchestrator.breed_image(breed, sub_breed, options=options)
            ))

        @self.app.get("/breed/{breed}/{sub_breed}/images/random/{amount}")
        async def sub_breed_random_images(request: Request, breed: str, sub_breed: str, amount: str):
            options = self._response_options(request, "imageMulti")
            return self.render(await self._dispatch(
                orchestrator.breed_image(breed, sub_breed, amount=parse_amount(amount), options=options)
            ))

        @self.app.get("/breed/{breed}")
        async def breed_text(request: Request, breed: str):
            options = self._response_options(request, "breedInfo")
            return self.render(await self._dispatch(orchestrator.breed_text(breed, options=options)))

        @self.app.get("/breed/{breed}/{sub_breed}")
        async def sub_breed_text(request: Request, breed: str, sub_breed: str):
            options = self._response_options(request, "breedInfo")
            return self.render(await self._dispatch(
                orchestrator.breed_text(breed, sub_breed, options=options)
            ))


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = GatewayService(config)
    return service.app


if __name__ == "__main__":
    service = GatewayService(get_config("gateway", 8000))
    service.run()
