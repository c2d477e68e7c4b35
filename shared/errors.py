"""
Shared error handling for the Breed Image Gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class GatewayException(Exception):
    """Base exception for gateway services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id or request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class UpstreamUnavailable(GatewayException):
    """The catalog API could not be reached or answered with a server error."""

    def __init__(self, endpoint: str, message: str = "Upstream unavailable", details: Optional[Dict[str, Any]] = None):
        self.endpoint = endpoint
        super().__init__("UPSTREAM_UNAVAILABLE", f"{endpoint}: {message}", details)


class SelectionFailed(GatewayException):
    """A response could not be sampled (error status, malformed or empty message)."""

    def __init__(self, message: str = "Selection failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("SELECTION_FAILED", message, details)


class RouteNotResolved(GatewayException):
    """No gateway operation matches the requested path."""

    def __init__(self, path: str, details: Optional[Dict[str, Any]] = None):
        self.path = path
        super().__init__("ROUTE_NOT_RESOLVED", f"No route for {path}", details)
