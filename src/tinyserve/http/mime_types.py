"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Chooses the Content-Type for a file from the end of its URL path.

=============================================================================
HOW IT WORKS
=============================================================================

The table is an ordered list of (suffix, MIME type) pairs. The first suffix
the path ends with wins:

    /index.html       ──► text/html
    /css/site.css     ──► text/css
    /favicon.ico      ──► image/x-icon
    /notes.txt        ──► text/plain   (no match, default)

Matching is case-sensitive: "/LOGO.PNG" falls through to the default.

=============================================================================
"""

from typing import List, Tuple


# =============================================================================
# MIME TYPE TABLE
# =============================================================================
#
# Order matters: the first matching suffix wins.
#
MIME_TYPES: List[Tuple[str, str]] = [
    (".html", "text/html"),
    (".css", "text/css"),
    (".js", "application/javascript"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".ico", "image/x-icon"),
]

DEFAULT_MIME_TYPE = "text/plain"


def get_mime_type(path: str, default: str = DEFAULT_MIME_TYPE) -> str:
    """
    Get the MIME type for a URL path based on its suffix.

    Examples:
        >>> get_mime_type("/style.css")
        'text/css'
        >>> get_mime_type("/photo.jpeg")
        'image/jpeg'
        >>> get_mime_type("/README")
        'text/plain'
    """
    for suffix, mime_type in MIME_TYPES:
        if path.endswith(suffix):
            return mime_type
    return default
