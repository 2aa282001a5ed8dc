"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing underneath the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket, binds and listens              │
    │  • Runs the accept() loop on the calling thread                     │
    │  • Stops on SIGTERM / SIGINT or shutdown()                          │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One accepted client at a time
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Wraps the client socket                                          │
    │  • Reads until the end of the headers (TCP is a stream)             │
    │  • Sends the response and closes                                    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
