"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered request, on the "tinyserve.access" logger.

=============================================================================
FORMATS
=============================================================================

TEXT (default, close to Apache's common log format):

    127.0.0.1 - - [19/Oct/2026:14:30:00 +0000] "GET /index.html" 200 1234 0.52ms

JSON (one object per line, for log shippers):

    {"timestamp": "...", "client_ip": "127.0.0.1", "method": "GET",
     "path": "/index.html", "status": 200, "content_length": 1234,
     "duration_ms": 0.52}

Requests that fail to parse never reach the access log; the dispatcher
logs those as warnings and closes the connection.

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict


logger = logging.getLogger("tinyserve.access")


@dataclass
class RequestLog:
    """A single access log entry."""

    client_ip: str
    method: str
    path: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str = field(default_factory=lambda: time.strftime("%d/%b/%Y:%H:%M:%S %z"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "client_ip": self.client_ip,
            "method": self.method,
            "path": self.path,
            "status": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
        }

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" '
            f'{self.status_code} {self.content_length} '
            f'{self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """Emit an entry at INFO as text or JSON."""
    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())
