"""
Async HTTP client for the dog image catalog API.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple, TYPE_CHECKING

import httpx

from shared.errors import UpstreamUnavailable
from shared.logging import get_logger

from service_breeds.app.domain.models import UpstreamResult

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class UpstreamClient:
    """Issues single GET requests against the catalog API.

    Client errors (4xx) come back as ordinary results so they can be cached
    and passed through. Transport failures and server errors raise
    ``UpstreamUnavailable``. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.base_url = base_url
        self.metrics = metrics
        self.logger = get_logger("gateway.upstream")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    async def get(self, endpoint: str) -> UpstreamResult:
        """Fetch one endpoint path, e.g. ``breed/hound/images``."""
        url = self.url_for(endpoint)

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            self.logger.error("Upstream request failed", url=url, error=str(exc))
            self._record("transport_error")
            raise UpstreamUnavailable(endpoint, str(exc), details={"url": url}) from exc

        if response.status_code >= 500:
            self.logger.error(
                "Upstream server error",
                url=url,
                status_code=response.status_code,
                response=response.text[:200],
            )
            self._record("server_error")
            raise UpstreamUnavailable(
                endpoint,
                f"Unexpected status {response.status_code}",
                details={"url": url, "status_code": response.status_code},
            )

        if response.status_code >= 400:
            self.logger.info("Upstream client error", url=url, status_code=response.status_code)
            self._record("client_error")
        else:
            self.logger.debug("Upstream response", url=url, status_code=response.status_code)
            self._record("ok")

        return UpstreamResult(
            status=response.status_code,
            body=response.text,
            headers=self._collect_headers(response.headers),
        )

    @staticmethod
    def _collect_headers(headers: httpx.Headers) -> Dict[str, Tuple[str, ...]]:
        return {name: tuple(headers.get_list(name)) for name in headers.keys()}

    def _record(self, outcome: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("upstream_requests_total", outcome=outcome)
