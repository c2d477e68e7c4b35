"""
Breed image gateway service package.

The gateway fronts the public dog image catalog API, adding:
- Read-through caching of upstream responses in Redis
- Random single and batch image selection from cached lists
- Alt-text annotation and XML output on request

Structure:
- app.main: FastAPI app, routes and outcome rendering.
- app.adapters: HTTP client for the catalog API.
- app.caching: Redis-backed store with time-to-live.
- app.sampling: Random selection over cached collections.
- app.transform: Annotation, XML rendering and response headers.
- app.gateway: Per-route orchestration.
- app.domain: Upstream results, payload variants and outcomes.
"""
