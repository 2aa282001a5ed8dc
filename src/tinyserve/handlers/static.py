"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves GET requests from files under a root directory.

=============================================================================
DECISION SEQUENCE
=============================================================================

Each request goes through these steps in order; the first one that
produces a response wins:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   1. Method is not GET?              ──► 405 Method Not Allowed      │
    │   2. Path fails validation?          ──► 400 Bad Request             │
    │   3. Path is "/"?                    ──► rewrite to "/index.html"    │
    │   4. Pick Content-Type from suffix                                   │
    │   5. Full path = root_dir + path     (plain string concatenation)    │
    │   6. Can't open the file?            ──► 404 Not Found               │
    │   7. Size it, read it in one go                                      │
    │      short read / out of memory?     ──► 500 Internal Server Error   │
    │   8. Everything read                 ──► 200 OK with the file bytes  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The handler never raises. Every failure becomes an error response.

=============================================================================
SECURITY
=============================================================================

The path is NOT normalized or resolved. Traversal is prevented entirely by
validate_path(), which allows only:

    A-Z  a-z  0-9  /  _  .  -

and rejects any path containing "..". With those rules root_dir + path
can't escape root_dir, so no os.path.join or realpath is needed.

    GET /../etc/passwd     ──► 400  (contains "..")
    GET /a;rm -rf          ──► 400  (";" and " " not allowed)
    GET /css/site-1.2.css  ──► served

=============================================================================
"""

import logging
import os
import re
from typing import Callable, IO

from ..http.methods import HTTPMethod, classify_method
from ..http.mime_types import get_mime_type
from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse, SERVER_NAME,
    build_response, error_response,
)
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


INDEX_PATH = "/index.html"

_ALLOWED_PATH = re.compile(r"[A-Za-z0-9/_.\-]+")


def validate_path(path: str) -> bool:
    """
    Check that a request path is safe to append to the root directory.

    Examples:
        >>> validate_path("/ok/name-1.2.html")
        True
        >>> validate_path("/../etc/passwd")
        False
        >>> validate_path("/a;b")
        False
    """
    if not path or not path.startswith("/"):
        return False
    if ".." in path:
        return False
    return _ALLOWED_PATH.fullmatch(path) is not None


class StaticFileHandler:
    """
    Handler for serving files from a root directory.

    =========================================================================
    USAGE
    =========================================================================

        handler = StaticFileHandler("/var/www")
        response = handler.handle(request)

    The opener argument is the filesystem collaborator. It defaults to the
    builtin open() and is called as opener(path, "rb").
    =========================================================================
    """

    def __init__(
        self,
        root_dir: str,
        opener: Callable[..., IO[bytes]] = open,
        server_name: str = SERVER_NAME,
    ):
        """
        Args:
            root_dir: Directory the request paths are appended to. Kept as
                      given and concatenated verbatim.
            opener: Callable used to open files for reading.
            server_name: Value of the Server header on every response.
        """
        self.root_dir = root_dir
        self.opener = opener
        self.server_name = server_name

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Serve one GET request.

        May rewrite request.path from "/" to "/index.html".

        Returns:
            A 200 response with the file contents, or an error response
            (400, 404, 405 or 500).
        """
        # ─────────────────────────────────────────────────────────────────
        # 1. METHOD
        # ─────────────────────────────────────────────────────────────────
        if classify_method(request.method) is not HTTPMethod.GET:
            return self._error(HTTPStatus.METHOD_NOT_ALLOWED)

        # ─────────────────────────────────────────────────────────────────
        # 2. PATH VALIDATION
        # ─────────────────────────────────────────────────────────────────
        if not validate_path(request.path):
            logger.warning(f"Invalid path: {request.path!r}")
            return self._error(HTTPStatus.BAD_REQUEST)

        # ─────────────────────────────────────────────────────────────────
        # 3-4. INDEX REWRITE + CONTENT TYPE
        # ─────────────────────────────────────────────────────────────────
        if request.path == "/":
            request.path = INDEX_PATH
        content_type = get_mime_type(request.path)

        # ─────────────────────────────────────────────────────────────────
        # 5-6. OPEN
        # ─────────────────────────────────────────────────────────────────
        file_path = self.root_dir + request.path
        logger.debug(f"Resolved {request.path} -> {file_path} ({content_type})")

        try:
            file = self.opener(file_path, "rb")
        except OSError as e:
            logger.warning(f"File not found: {file_path} ({e.strerror or e})")
            return self._error(HTTPStatus.NOT_FOUND, content_type)

        # ─────────────────────────────────────────────────────────────────
        # 7. SIZE + READ
        # ─────────────────────────────────────────────────────────────────
        with file:
            try:
                file.seek(0, os.SEEK_END)
                file_size = file.tell()
                file.seek(0, os.SEEK_SET)
                content = file.read(file_size)
            except (OSError, MemoryError) as e:
                logger.error(f"Failed to read {file_path}: {e!r}")
                return self._error(HTTPStatus.INTERNAL_SERVER_ERROR, content_type)

        if len(content) != file_size:
            logger.error(
                f"Failed to read file {file_path} (read {len(content)} of {file_size} bytes)"
            )
            return self._error(HTTPStatus.INTERNAL_SERVER_ERROR, content_type)

        # ─────────────────────────────────────────────────────────────────
        # 8. SUCCESS
        # ─────────────────────────────────────────────────────────────────
        response = build_response(
            HTTPStatus.OK, content_type, content, server=self.server_name
        )
        response.content_length = file_size
        return response

    def _error(self, status: HTTPStatus, content_type: str = "text/plain") -> HTTPResponse:
        return error_response(status, content_type, server=self.server_name)


def handle_get(request: HTTPRequest, root_dir: str) -> HTTPResponse:
    """
    Serve a GET request from root_dir with the default opener.

    Example:
        response = handle_get(parse_request(raw), "/var/www")
    """
    return StaticFileHandler(root_dir).handle(request)
