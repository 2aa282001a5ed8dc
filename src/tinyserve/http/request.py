"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes read from a client socket into an HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /index.html HTTP/1.1\r\n          ◄── Request line            │
    │   ─┬─ ─────┬───── ────┬───                                          │
    │    │       │          │                                              │
    │  Method   Path     Version                                          │
    │                                                                      │
    │   Host: localhost:8080\r\n              ◄── Headers                  │
    │   User-Agent: curl/8.0\r\n                                           │
    │   Accept: */*\r\n                                                    │
    │   \r\n                                  ◄── Blank line ends headers  │
    │                                                                      │
    │   (body)                                ◄── Ignored by this server   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT WE KEEP
=============================================================================

Only four headers matter to a static file server: Host, User-Agent,
Accept and Connection. Everything else is skipped without complaint,
as are header lines with no colon at all.

Every field has a length limit. A value that does not fit is an error
(FieldTooLong), never silently cut short.

=============================================================================
ERRORS
=============================================================================

    HTTPParseError
    ├── EmptyRequest            nothing but line breaks (or nothing at all)
    ├── MalformedRequestLine    request line is not exactly 3 tokens
    └── InvalidRequest          method or path ended up empty
        └── FieldTooLong        a field exceeded its limit

=============================================================================
"""

from dataclasses import dataclass
from typing import Dict, Optional


class HTTPParseError(Exception):
    """
    Raised when a raw request cannot be parsed.

    Carries the HTTP status the failure maps to. The dispatcher logs it
    with the failure and closes the connection without answering.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class EmptyRequest(HTTPParseError):
    """The buffer held no request line."""


class MalformedRequestLine(HTTPParseError):
    """The request line did not split into METHOD SP PATH SP VERSION."""


class InvalidRequest(HTTPParseError):
    """The request parsed but is missing a method or path."""


class FieldTooLong(InvalidRequest):
    """A request field is longer than the server accepts."""

    def __init__(self, field_name: str, length: int, limit: int):
        super().__init__(f"{field_name} too long: {length} > {limit} characters")
        self.field_name = field_name
        self.length = length
        self.limit = limit


# =============================================================================
# FIELD LIMITS
# =============================================================================
#
# Maximum length, in characters, of every field the parser stores.
#
FIELD_LIMITS: Dict[str, int] = {
    "method": 15,
    "path": 511,
    "version": 15,
    "host": 255,
    "user_agent": 511,
    "accept": 255,
    "connection": 31,
}

# Header name (lowercase) → HTTPRequest attribute
RECOGNIZED_HEADERS: Dict[str, str] = {
    "host": "host",
    "user-agent": "user_agent",
    "accept": "accept",
    "connection": "connection",
}


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    LIFECYCLE
    =========================================================================

        Raw bytes  ──parse──►  HTTPRequest  ──dispatch──►  handler
                                   │
                                   └── lives only as long as its connection

    Fields are plain strings. A header that was not sent is "".

    The request is read-only once parsed, with one exception: the GET
    handler rewrites path "/" to "/index.html".
    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    host: str = ""
    user_agent: str = ""
    accept: str = ""
    connection: str = ""

    raw: bytes = b""

    def describe(self) -> str:
        """Multi-line dump of the request, for debug logging."""
        lines = [
            f"Method: {self.method}",
            f"Path: {self.path}",
            f"Version: {self.version}",
            f"Host: {self.host}",
        ]
        if self.user_agent:
            lines.append(f"User-Agent: {self.user_agent}")
        if self.accept:
            lines.append(f"Accept: {self.accept}")
        if self.connection:
            lines.append(f"Connection: {self.connection}")
        return "\n".join(lines)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    =========================================================================
    ALGORITHM
    =========================================================================

        1. Decode as ISO-8859-1 (every byte maps to a character)
        2. Skip leading line breaks   ── nothing left? → EmptyRequest
        3. Split on CRLF
        4. Request line → 3 tokens    ── otherwise   → MalformedRequestLine
        5. Header lines until blank   ── keep the 4 we know
        6. Check method and path      ── empty?      → InvalidRequest

    =========================================================================
    """

    def __init__(self, field_limits: Optional[Dict[str, int]] = None):
        """
        Args:
            field_limits: Per-field maximum lengths. Defaults to FIELD_LIMITS.
        """
        self.field_limits = dict(FIELD_LIMITS if field_limits is None else field_limits)

    def parse(self, data: bytes) -> HTTPRequest:
        """
        Parse one request from a raw buffer.

        Args:
            data: Bytes read from the socket. Anything after the blank line
                  that ends the headers is ignored.

        Returns:
            The parsed HTTPRequest.

        Raises:
            EmptyRequest, MalformedRequestLine, InvalidRequest, FieldTooLong
        """
        # ISO-8859-1 maps every byte 1:1, so decoding can't fail
        text = data.decode("iso-8859-1").lstrip("\r\n")
        if not text:
            raise EmptyRequest("Empty request")

        lines = text.split("\r\n")

        method, path, version = self._parse_request_line(lines[0])

        fields = {"method": method, "path": path, "version": version}
        fields.update(self._parse_headers(lines[1:]))

        if not method or not path:
            raise InvalidRequest("Request has no method or path")

        for name, value in fields.items():
            self._check_length(name, value)

        return HTTPRequest(raw=data, **fields)

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split "METHOD SP PATH SP VERSION" on single spaces.

        Runs of spaces are not collapsed: "GET  / HTTP/1.1" yields four
        tokens and is rejected.
        """
        tokens = line.split(" ")
        if len(tokens) != 3:
            raise MalformedRequestLine(f"Invalid request line: {line!r}")
        method, path, version = tokens
        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Pull the recognized headers out of the header lines.

        Stops at the first empty line. A repeated header keeps its last value.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                break

            name, sep, value = line.partition(":")
            if not sep:
                continue  # no colon, not a header

            attribute = RECOGNIZED_HEADERS.get(name.lower())
            if attribute is None:
                continue

            headers[attribute] = value.strip()

        return headers

    def _check_length(self, name: str, value: str) -> None:
        limit = self.field_limits.get(name)
        if limit is not None and len(value) > limit:
            raise FieldTooLong(name, len(value), limit)


def parse_request(data: bytes) -> HTTPRequest:
    """
    Parse a request with the default field limits.

    Use RequestParser directly to change the limits.
    """
    return RequestParser().parse(data)
