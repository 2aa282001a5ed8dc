"""
=============================================================================
TINYSERVE - A Small Static File HTTP/1.1 Server
=============================================================================

Serves files from one directory over plain HTTP/1.1, using nothing but
raw sockets. One connection at a time, one request per connection.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       TINYSERVE ARCHITECTURE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   bytes ──► RequestParser ──► HTTPRequest                           │
    │                                    │                                 │
    │                                    ▼                                 │
    │                            HTTPServer.dispatch                       │
    │                          GET │            │ anything else            │
    │                              ▼            ▼                          │
    │                   StaticFileHandler      405                         │
    │                              │            │                          │
    │                              ▼            ▼                          │
    │                            HTTPResponse ──► serialize ──► bytes     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyserve/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyserve)
    ├── server.py            # HTTPServer: parse, dispatch, respond
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # One log line per request
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP listening socket and accept loop
    │   └── connection.py    # Client connection wrapper
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response model and serializer
    │   ├── methods.py       # Method classification
    │   ├── status_codes.py  # Status codes and reason phrases
    │   └── mime_types.py    # Content-Type from file suffix
    └── handlers/
        └── static.py        # GET handler for files under the root

=============================================================================
QUICK START
=============================================================================

    from tinyserve import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, root_dir="./public"))
    server.run()

Or from the shell:

    tinyserve -p 8080 -d ./public

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
