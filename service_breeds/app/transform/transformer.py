"""
Output shaping: alt-text annotation, XML conversion and response headers.
"""

from typing import Any, Callable, Dict, Optional

from shared.logging import get_logger

from service_breeds.app.domain.models import (
    Collection,
    GatewayResponse,
    ImagePayload,
    ResponseOptions,
    Scalar,
    UpstreamResult,
)
from .formatting import alt_text_for_url
from .xml_encoder import payload_to_xml

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPE = "application/xml"


class ResponseTransformer:
    """Rewrites upstream results into the representation a caller asked for."""

    def __init__(self, alt_text: Optional[Callable[[str], str]] = None):
        self.alt_text = alt_text or alt_text_for_url
        self.logger = get_logger("gateway.transformer")

    def annotate(self, result: UpstreamResult) -> UpstreamResult:
        """Pair every image URL in the message with its alt text.

        Error payloads and bodies that do not decode are returned untouched.
        """
        try:
            payload = ImagePayload.decode(result.body)
        except ValueError:
            self.logger.warning("Skipping annotation of undecodable body", status=result.status)
            return result

        if not payload.succeeded:
            return result

        message = payload.message
        if isinstance(message, Scalar):
            annotated = Scalar(self._annotate_image(message.value))
        elif message.is_mapping:
            annotated = Collection({key: self._annotate_image(image) for key, image in message.items.items()})
        else:
            annotated = Collection([self._annotate_image(image) for image in message.items])

        return result.with_body(payload.with_message(annotated).encode())

    def to_xml(self, result: UpstreamResult, type_tag: Optional[str] = None) -> str:
        try:
            payload = ImagePayload.decode(result.body)
        except ValueError:
            self.logger.warning("Rendering undecodable body as XML error", status=result.status)
            payload = ImagePayload(status="error", message=Scalar(result.body))
        return payload_to_xml(payload, type_tag)

    def respond(self, result: UpstreamResult, options: ResponseOptions = ResponseOptions()) -> GatewayResponse:
        """Build the outbound response.

        JSON responses forward upstream ``cache-control``; XML responses never do.
        """
        if options.annotate:
            result = self.annotate(result)

        headers: Dict[str, str] = {"Access-Control-Allow-Origin": "*"}

        if options.xml:
            return GatewayResponse(
                status_code=result.status,
                content=self.to_xml(result, options.type_tag),
                media_type=XML_MEDIA_TYPE,
                headers=headers,
            )

        cache_control = result.header("cache-control")
        if cache_control is not None:
            headers["Cache-Control"] = cache_control

        return GatewayResponse(
            status_code=result.status,
            content=result.body,
            media_type=JSON_MEDIA_TYPE,
            headers=headers,
        )

    def _annotate_image(self, url: Any) -> Dict[str, Any]:
        return {"url": url, "altText": self.alt_text(str(url))}
