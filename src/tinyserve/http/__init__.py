"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that knows about HTTP itself, and nothing about sockets.

    request.py       bytes ──► HTTPRequest
    methods.py       "GET" ──► HTTPMethod.GET
    response.py      HTTPResponse ──► bytes
    status_codes.py  404 ──► "Not Found"
    mime_types.py    "/logo.png" ──► "image/png"

=============================================================================
"""

from .methods import HTTPMethod, classify_method
from .mime_types import DEFAULT_MIME_TYPE, MIME_TYPES, get_mime_type
from .request import (
    FIELD_LIMITS,
    EmptyRequest,
    FieldTooLong,
    HTTPParseError,
    HTTPRequest,
    InvalidRequest,
    MalformedRequestLine,
    RequestParser,
    parse_request,
)
from .response import (
    BufferTooSmall,
    ConstructionError,
    HTTPResponse,
    MissingContentType,
    SerializationError,
    build_response,
    error_response,
    format_http_date,
    method_not_allowed,
    serialize,
)
from .status_codes import HTTPStatus, status_phrase

__all__ = [
    # Methods
    "HTTPMethod",
    "classify_method",
    # MIME types
    "DEFAULT_MIME_TYPE",
    "MIME_TYPES",
    "get_mime_type",
    # Request
    "FIELD_LIMITS",
    "EmptyRequest",
    "FieldTooLong",
    "HTTPParseError",
    "HTTPRequest",
    "InvalidRequest",
    "MalformedRequestLine",
    "RequestParser",
    "parse_request",
    # Response
    "BufferTooSmall",
    "ConstructionError",
    "HTTPResponse",
    "MissingContentType",
    "SerializationError",
    "build_response",
    "error_response",
    "method_not_allowed",
    "format_http_date",
    "serialize",
    # Status codes
    "HTTPStatus",
    "status_phrase",
]
