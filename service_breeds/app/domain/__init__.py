"""
Domain types for the gateway: upstream results, decoded payloads and outcomes.
"""

from .models import (
    Collection,
    GatewayResponse,
    ImagePayload,
    Message,
    ResponseOptions,
    Scalar,
    UpstreamResult,
)
from .outcomes import NotFound, Ok, Outcome, Unavailable

__all__ = [
    "Collection",
    "GatewayResponse",
    "ImagePayload",
    "Message",
    "ResponseOptions",
    "Scalar",
    "UpstreamResult",
    "NotFound",
    "Ok",
    "Outcome",
    "Unavailable",
]
