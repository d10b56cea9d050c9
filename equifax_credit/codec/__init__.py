"""
Wire codec: XML serialization, charset transcoding and schema validation.
"""

from .charset import WIRE_CHARSET, declared_charset, decode_from_wire, encode_to_wire, resolve_charset
from .schema_validator import load_schema, validate_request
from .serializer import (
    capture_sections,
    deserialize_request,
    deserialize_response,
    render_request,
    serialize_request,
    serialize_response,
)

__all__ = [
    "WIRE_CHARSET", "declared_charset", "decode_from_wire", "encode_to_wire", "resolve_charset",
    "load_schema", "validate_request",
    "capture_sections", "deserialize_request", "deserialize_response",
    "render_request", "serialize_request", "serialize_response",
]
