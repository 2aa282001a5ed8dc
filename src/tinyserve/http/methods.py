"""
=============================================================================
HTTP METHOD CLASSIFICATION
=============================================================================

Maps the method token from a request line onto a closed set of methods.

The dispatcher routes on the result:

    "GET"     ──► HTTPMethod.GET          ──► static file handler
    "post"    ──► HTTPMethod.POST         ──► 405 Method Not Allowed
    "BREW"    ──► HTTPMethod.UNRECOGNIZED ──► 405 Method Not Allowed

UNRECOGNIZED is its own member. It never shares a value with a real
method, so "unknown" can't be mistaken for GET or any other method.

=============================================================================
"""

from enum import Enum


class HTTPMethod(Enum):
    """Request methods defined by RFC 7231 / RFC 5789."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    # Sentinel for anything else
    UNRECOGNIZED = "UNRECOGNIZED"


_KNOWN_METHODS = {
    member.value: member
    for member in HTTPMethod
    if member is not HTTPMethod.UNRECOGNIZED
}


def classify_method(token: str) -> HTTPMethod:
    """
    Classify a method token, ignoring case.

    Examples:
        >>> classify_method("get")
        <HTTPMethod.GET: 'GET'>
        >>> classify_method("UNRECOGNIZED")
        <HTTPMethod.UNRECOGNIZED: 'UNRECOGNIZED'>
    """
    return _KNOWN_METHODS.get(token.upper(), HTTPMethod.UNRECOGNIZED)
