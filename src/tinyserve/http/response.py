"""
=============================================================================
HTTP RESPONSE MODEL & SERIALIZER
=============================================================================

Builds HTTP/1.1 responses and turns them into wire bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

Every response this server sends has the same fixed shape:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.1 200 OK\r\n                       ◄── Status line          │
    │   Date: Mon, 19 Oct 2026 12:00:00 GMT\r\n   ◄── Stamped at build()   │
    │   Server: tinyserve/1.0.0\r\n                                        │
    │   Content-Type: text/html\r\n                                        │
    │   Content-Length: 11\r\n                    ◄── == len(body)         │
    │   Connection: close\r\n                     ◄── Always close         │
    │   \r\n                                      ◄── End of headers       │
    │   <h1>hi</h1>                               ◄── Body, verbatim       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The header order never changes and no other headers are emitted.

=============================================================================
TWO STEPS
=============================================================================

    build_response()                       serialize()
    ─────────────────                      ───────────
    status, content type, body   ──►   HTTPResponse   ──►   bytes

The Date header is fixed when the response is built, so serializing the
same response twice produces identical bytes.

=============================================================================
ERRORS
=============================================================================

    ConstructionError
    └── MissingContentType      build_response() called without a type

    SerializationError          body length disagrees with Content-Length
    └── BufferTooSmall          header block larger than the caller allows

=============================================================================
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from .. import __version__
from .status_codes import HTTPStatus, status_phrase


SERVER_NAME = f"tinyserve/{__version__}"
HTTP_VERSION = "HTTP/1.1"
CONNECTION_CLOSE = "close"

Body = Union[str, bytes, bytearray, memoryview]


class ConstructionError(Exception):
    """A response could not be constructed from the given arguments."""


class MissingContentType(ConstructionError):
    """build_response() was called without a content type."""


class SerializationError(Exception):
    """A response could not be turned into bytes."""


class BufferTooSmall(SerializationError):
    """The header block does not fit in the allowed number of bytes."""

    def __init__(self, needed: int, limit: int):
        super().__init__(f"Header block needs {needed} bytes, limit is {limit}")
        self.needed = needed
        self.limit = limit


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Prefer build_response() to constructing this directly: it fills in the
    phrase, date and content length consistently.

    Invariant: content_length == len(body) when body is set, 0 otherwise.
    The GET handler sets content_length explicitly to the size of the file
    it read.
    """

    status_code: int
    status_phrase: str
    date: str
    server: str
    content_type: str
    content_length: int = 0
    body: Optional[bytes] = None
    version: str = HTTP_VERSION
    connection: str = CONNECTION_CLOSE

    @property
    def status_line(self) -> str:
        """
        The first line of the response.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {self.status_code} {self.status_phrase}"

    def to_bytes(self, header_limit: Optional[int] = None) -> bytes:
        """Shortcut for serialize(self)."""
        return serialize(self, header_limit)


def build_response(
    status: int,
    content_type: Optional[str],
    body: Optional[Body] = None,
    server: str = SERVER_NAME,
    now: Optional[datetime] = None,
) -> HTTPResponse:
    """
    Construct a response.

    Args:
        status: Numeric status code. Codes outside the known table are
                allowed; their phrase is "Unknown".
        content_type: MIME type for the Content-Type header. Required.
        body: Optional body. Strings are encoded as UTF-8, other bytes-like
              values are copied so the response owns its body.
        server: Value of the Server header.
        now: Timestamp for the Date header (defaults to the current UTC time).

    Returns:
        A new HTTPResponse.

    Raises:
        MissingContentType: If content_type is empty or None.
    """
    if not content_type:
        raise MissingContentType("content_type is required")

    if isinstance(body, str):
        owned: Optional[bytes] = body.encode("utf-8")
    elif body is not None:
        owned = bytes(body)
    else:
        owned = None

    return HTTPResponse(
        status_code=int(status),
        status_phrase=status_phrase(int(status)),
        date=format_http_date(now or datetime.now(timezone.utc)),
        server=server,
        content_type=content_type,
        content_length=len(owned) if owned is not None else 0,
        body=owned,
    )


def serialize(response: HTTPResponse, header_limit: Optional[int] = None) -> bytes:
    """
    Turn a response into the bytes sent on the wire.

    =========================================================================
    OUTPUT
    =========================================================================

        <version> <code> <phrase>\r\n
        Date: <date>\r\n
        Server: <server>\r\n
        Content-Type: <content_type>\r\n
        Content-Length: <content_length>\r\n
        Connection: <connection>\r\n
        \r\n
        <body bytes>

    =========================================================================

    Args:
        response: The response to serialize.
        header_limit: Maximum size of the header block in bytes, or None
                      for no limit.

    Returns:
        Header block followed by exactly content_length body bytes.

    Raises:
        BufferTooSmall: If the header block exceeds header_limit.
        SerializationError: If the body length disagrees with content_length.
    """
    if response.body is not None and len(response.body) != response.content_length:
        raise SerializationError(
            f"Content-Length is {response.content_length} "
            f"but body has {len(response.body)} bytes"
        )

    lines = [
        response.status_line,
        f"Date: {response.date}",
        f"Server: {response.server}",
        f"Content-Type: {response.content_type}",
        f"Content-Length: {response.content_length}",
        f"Connection: {response.connection}",
        "",
        "",
    ]
    header_bytes = "\r\n".join(lines).encode("iso-8859-1")

    if header_limit is not None and len(header_bytes) > header_limit:
        raise BufferTooSmall(len(header_bytes), header_limit)

    if response.body is None:
        return header_bytes
    return header_bytes + response.body


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date.

    Example: "Thu, 15 Jan 2026 12:30:45 GMT"

    Aware datetimes are converted to UTC first. Naive ones are taken as UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    # English names regardless of locale
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def error_response(
    status: int,
    content_type: str = "text/plain",
    server: str = SERVER_NAME,
) -> HTTPResponse:
    """
    Build an error response whose body is the status phrase.

    Examples:
        error_response(HTTPStatus.METHOD_NOT_ALLOWED)   # body "Method Not Allowed"
        error_response(404, "image/png")                # body "Not Found"
    """
    return build_response(status, content_type, status_phrase(int(status)), server=server)


def method_not_allowed(server: str = SERVER_NAME) -> HTTPResponse:
    """405 Method Not Allowed, text/plain."""
    return error_response(HTTPStatus.METHOD_NOT_ALLOWED, server=server)
