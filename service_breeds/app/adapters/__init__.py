"""
Adapters package for the gateway.

Contains the HTTP client for the upstream image catalog. Adapters stay thin:
they build URLs, issue requests and map transport failures to shared errors.
"""

from .upstream_client import UpstreamClient

__all__ = ["UpstreamClient"]
