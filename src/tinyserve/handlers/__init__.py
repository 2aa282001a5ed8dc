"""
Request handlers.

Only one lives here: StaticFileHandler, which answers GET requests with
files from the server's root directory.
"""

from .static import StaticFileHandler, handle_get, validate_path

__all__ = [
    "StaticFileHandler",
    "handle_get",
    "validate_path",
]
