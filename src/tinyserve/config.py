"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All server settings in one value, built once and handed to the server.

There is no module-level port or directory: the HTTPServer receives a
ServerConfig at construction and passes what it needs (the root directory,
the server name) down to the handler.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── tinyserve --port 8080 --directory ./public                 │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── TINYSERVE_PORT=8080 python -m tinyserve                    │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass

from . import __version__


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    HTTP SETTINGS
    - root_dir, max_request_size, header_buffer_size, server_name

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind to. "0.0.0.0" listens on every interface."""

    port: int = 80
    """Port to listen on. Ports below 1024 need root on Unix."""

    backlog: int = 64
    """Connections the OS queues while we are busy with the current one."""

    timeout: float = 30.0
    """Seconds to wait on a client socket before giving up on it."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "./"
    """
    Directory files are served from. Request paths are appended to it
    verbatim, so "./" + "/index.html" reads ".//index.html".
    """

    max_request_size: int = 8192
    """
    Bytes read from a client before parsing (8 KB).
    Plenty for a request line and the headers we care about.
    """

    header_buffer_size: int = 512
    """
    Starting size of the response header buffer. The dispatcher doubles it,
    for that response only, whenever a header block doesn't fit.
    """

    server_name: str = f"tinyserve/{__version__}"
    """Value of the Server response header."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR)."""

    log_format: str = "text"
    """Access log format: 'text' (one line per request) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        TINYSERVE_HOST       Bind address (default: 0.0.0.0)
        TINYSERVE_PORT       Port (default: 80)
        TINYSERVE_ROOT       Root directory (default: ./)
        TINYSERVE_TIMEOUT    Client socket timeout in seconds (default: 30)
        TINYSERVE_LOG_LEVEL  Logging level (default: INFO)
        TINYSERVE_LOG_FORMAT Access log format (default: text)

        =====================================================================

        Raises:
            ValueError: If TINYSERVE_PORT or TINYSERVE_TIMEOUT isn't a number.
        """
        return cls(
            host=os.getenv("TINYSERVE_HOST", "0.0.0.0"),
            port=int(os.getenv("TINYSERVE_PORT", "80")),
            root_dir=os.getenv("TINYSERVE_ROOT", "./"),
            timeout=float(os.getenv("TINYSERVE_TIMEOUT", "30")),
            log_level=os.getenv("TINYSERVE_LOG_LEVEL", "INFO"),
            log_format=os.getenv("TINYSERVE_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction so a bad port or a missing
        directory fails at startup, not on the first request.

        Raises:
            ValueError: Describing the first invalid setting.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if not os.path.isdir(self.root_dir):
            raise ValueError(f"Directory does not exist: {self.root_dir}")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.header_buffer_size < 64:
            raise ValueError("header_buffer_size must be >= 64")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}. Use 'text' or 'json'.")
