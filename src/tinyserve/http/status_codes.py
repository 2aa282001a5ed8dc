"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The fixed table of status codes this server knows how to name.

=============================================================================
STATUS LINE
=============================================================================

Every response starts with a status line:

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      │
              │      └── Reason phrase (from this module)
              └───────── Status code

The table below is deliberately small: it covers the codes a static file
server can produce plus a few common neighbours. Any other code can still
be sent - it is emitted numerically with the phrase "Unknown".

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  2xx   │ 200 OK, 201 Created, 204 No Content                      │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request, 401 Unauthorized, 403 Forbidden,        │
    │        │ 404 Not Found, 405 Method Not Allowed                    │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Server Error, 501 Not Implemented,          │
    │        │ 503 Service Unavailable                                  │
    └────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


UNKNOWN_PHRASE = "Unknown"


class HTTPStatus(IntEnum):
    """
    HTTP status codes known to the server.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES[self]

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx codes."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}


def status_phrase(code: int) -> str:
    """
    Look up the reason phrase for a numeric status code.

    Codes outside the table map to "Unknown" instead of raising, so callers
    can emit any numeric code they like.

    Examples:
        >>> status_phrase(200)
        'OK'
        >>> status_phrase(418)
        'Unknown'
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return UNKNOWN_PHRASE
