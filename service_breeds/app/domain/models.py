"""
Value types shared by the cache, sampler, transformer and orchestrator.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class UpstreamResult:
    """Status, raw body and headers of one catalog API response."""

    status: int
    body: str
    headers: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        """First value of a header, looked up case-insensitively."""
        values = self.headers.get(name.lower())
        if values:
            return values[0]
        return None

    def with_body(self, body: str) -> "UpstreamResult":
        return replace(self, body=body)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the result to a JSON-friendly dictionary."""
        return {
            "status": self.status,
            "body": self.body,
            "headers": {name: list(values) for name, values in self.headers.items()},
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UpstreamResult":
        """Rehydrate a result from cached JSON state."""
        headers = payload.get("headers") or {}
        return cls(
            status=int(payload["status"]),
            body=str(payload["body"]),
            headers={str(name).lower(): tuple(values) for name, values in headers.items()},
        )


@dataclass(frozen=True)
class Scalar:
    """A message holding one value (an image URL, a breed name, an annotated image)."""

    value: Any

    def raw(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Collection:
    """A message holding a list, or a mapping keyed by breed."""

    items: Union[List[Any], Dict[str, Any]]

    @property
    def is_mapping(self) -> bool:
        return isinstance(self.items, dict)

    def entries(self) -> List[Any]:
        """Sampleable entries: list elements, or mapping values."""
        if isinstance(self.items, dict):
            return list(self.items.values())
        return list(self.items)

    def raw(self) -> Any:
        return self.items

    def __len__(self) -> int:
        return len(self.items)


Message = Union[Scalar, Collection]

SUCCESS = "success"


@dataclass(frozen=True)
class ImagePayload:
    """Decoded ``{"status": ..., "message": ...}`` body."""

    status: str
    message: Message

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCESS

    @classmethod
    def decode(cls, body: str) -> "ImagePayload":
        """Parse a response body, raising ValueError when it is not a catalog payload."""
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError("payload is not a JSON object")
        if "message" not in data:
            raise ValueError("payload has no message")

        message = data["message"]
        if isinstance(message, (list, dict)):
            wrapped: Message = Collection(message)
        else:
            wrapped = Scalar(message)
        return cls(status=str(data.get("status", "")), message=wrapped)

    def with_message(self, message: Message) -> "ImagePayload":
        return replace(self, message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message.raw()}

    def encode(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class GatewayResponse:
    """Wire-ready response produced by the transformer."""

    status_code: int
    content: str
    media_type: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseOptions:
    """Per-request output shaping flags."""

    annotate: bool = False
    xml: bool = False
    type_tag: Optional[str] = None
