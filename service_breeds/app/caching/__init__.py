"""
Gateway caching package.

Upstream responses are memoized in Redis under a time-to-live so repeated
catalog reads are served without touching the upstream API.
"""

from .cache_store import CacheStore, cache_key

__all__ = ["CacheStore", "cache_key"]
