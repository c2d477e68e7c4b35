"""
Response transformation: annotation, XML rendering and header rules.
"""

from .transformer import JSON_MEDIA_TYPE, XML_MEDIA_TYPE, ResponseTransformer

__all__ = ["JSON_MEDIA_TYPE", "XML_MEDIA_TYPE", "ResponseTransformer"]
