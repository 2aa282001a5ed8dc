"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the length of one request/response.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

This server does not do keep-alive. Every connection goes through the
same short lifecycle and is closed afterwards:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Lifecycle                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED             │
    │              │              │                       ▲                │
    │              │              └── parse failure ──────┤                │
    │              └── client hung up / timeout ──────────┘                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
READING
=============================================================================

TCP is a byte stream: one recv() may return half a request line, or the
whole request. We keep calling recv() until one of:

    - the blank line that ends the headers (\r\n\r\n) has arrived
    - max_request_size bytes have been read
    - the client closed its side

Request bodies are not supported, so we never wait for one.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, mostly useful in logs."""

    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 4096
    timeout: Optional[float] = 30.0
    max_request_size: int = 8192

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read the request head from the socket.

        Returns:
            Up to max_request_size bytes, or None if the client closed the
            connection without sending anything.

        Raises:
            TimeoutError: If the client stops sending before the headers end.
        """
        self.state = ConnectionState.READING
        buffer = b""

        try:
            while b"\r\n\r\n" not in buffer and len(buffer) < self.max_request_size:
                chunk = self._recv()
                if not chunk:
                    break  # client closed its side
                buffer += chunk
        except socket.timeout:
            raise TimeoutError("Request read timeout")

        if not buffer:
            return None

        return buffer[:self.max_request_size]

    def _recv(self) -> bytes:
        """
        recv() that treats a reset connection as a closed one.

        Returns:
            Received bytes, or b"" if the connection is gone.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so the whole response goes out, however many
        send() calls it takes.

        Returns:
            True if sent, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) first so the client sees a clean end of stream
        after the response, then release the descriptor. Safe to call twice.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # already disconnected

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                raw = conn.read_request()
                conn.send_response(data)
            # closed here, whatever happened
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
