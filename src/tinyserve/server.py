"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: socket server, request parser, method dispatch,
static file handler and response serializer.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts the TCP connection

    2. READ
       └── Connection reads up to max_request_size bytes (8 KB)

    3. PARSE
       └── RequestParser builds an HTTPRequest
           parse failure ──► log a warning, close, no response

    4. DISPATCH
       └── GET ──► StaticFileHandler
           anything else ──► 405 Method Not Allowed

    5. SERIALIZE
       └── header block too big for the buffer ──► double it, try again

    6. SEND AND CLOSE
       └── one access log line, then the connection is closed

Everything runs on the thread that called run(). The next connection is
accepted only after the current one is closed.

=============================================================================
"""

import logging
import time
from typing import Optional, Tuple

from .access_log import RequestLog, log_request
from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import StaticFileHandler
from .http import (
    BufferTooSmall, HTTPMethod, HTTPParseError, HTTPRequest, HTTPResponse,
    RequestParser, classify_method, method_not_allowed, serialize,
)


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Static file HTTP server.

    =========================================================================
    USAGE
    =========================================================================

        config = ServerConfig(port=8080, root_dir="./public")
        server = HTTPServer(config)
        server.run()          # blocks until SIGINT/SIGTERM or shutdown()

    The request-level pieces can be used without a socket:

        data = server.handle_raw(b"GET / HTTP/1.1\\r\\n\\r\\n")

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults to ServerConfig().

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._parser = RequestParser()
        self._handler = StaticFileHandler(
            self.config.root_dir, server_name=self.config.server_name
        )
        self._socket_server = SocketServer(self.config)

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) the server is bound to."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a parsed request by method.

        GET goes to the static file handler. Every other method, recognized
        or not, gets 405 Method Not Allowed.
        """
        method = classify_method(request.method)

        if method is HTTPMethod.GET:
            return self._handler.handle(request)

        logger.info(f"Method not allowed: {request.method} ({method.name})")
        return method_not_allowed(server=self.config.server_name)

    def handle_raw(self, raw: bytes) -> Optional[bytes]:
        """
        Turn raw request bytes into raw response bytes.

        Returns:
            The serialized response, or None if the request couldn't be
            parsed and the connection should be closed without an answer.
        """
        result = self._handle(raw)
        if result is None:
            return None
        return result[2]

    def _handle(self, raw: bytes) -> Optional[Tuple[HTTPRequest, HTTPResponse, bytes]]:
        try:
            request = self._parser.parse(raw)
        except HTTPParseError as e:
            logger.warning(
                f"Failed to parse request ({e.status_code} {type(e).__name__}): {e}, "
                f"closing without a response"
            )
            return None

        logger.debug(f"Received request:\n{request.describe()}")

        response = self.dispatch(request)
        return request, response, self._serialize(response)

    def _serialize(self, response: HTTPResponse) -> bytes:
        """Serialize, doubling the header buffer until the headers fit."""
        limit = self.config.header_buffer_size
        while True:
            try:
                return serialize(response, limit)
            except BufferTooSmall as e:
                logger.debug(
                    f"Header block needs {e.needed} bytes, growing buffer "
                    f"{limit} -> {limit * 2}"
                )
                limit *= 2

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection, then close it.

        Called by SocketServer for each accepted client.
        """
        with conn:
            try:
                raw = conn.read_request()
            except TimeoutError:
                logger.warning(f"[{conn.id}] Timed out reading from {conn.client_ip}")
                return

            if raw is None:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            conn.state = ConnectionState.PROCESSING
            start_time = time.time()

            result = self._handle(raw)
            if result is None:
                return

            request, response, data = result
            conn.send_response(data)

            duration_ms = (time.time() - start_time) * 1000
            log_request(
                RequestLog(
                    client_ip=conn.client_ip,
                    method=request.method,
                    path=request.path,
                    status_code=response.status_code,
                    content_length=response.content_length,
                    duration_ms=duration_ms,
                ),
                self.config.log_format,
            )

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Returns once shutdown() is called or SIGINT/SIGTERM arrives.

        Raises:
            OSError: If the listening socket can't be bound.
        """
        self._setup_logging()

        logger.info(
            f"Starting {self.config.server_name} on "
            f"{self.config.host}:{self.config.port}, serving {self.config.root_dir}"
        )

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("tinyserve").setLevel(level)

    def shutdown(self):
        """Stop accepting connections. Safe to call from another thread."""
        self._socket_server.shutdown()
