"""URL and short code validation helpers."""

import re
from urllib.parse import urlsplit

SHORT_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,32}$")

# Paths served by the app itself; a short code with one of these
# names could never be reached through GET /{shortcode}
RESERVED_CODES = frozenset({"shorturls", "health", "docs", "redoc"})


def is_valid_url(candidate) -> bool:
    """True if candidate is an absolute URL with a scheme and a host."""
    if not isinstance(candidate, str) or not candidate:
        return False
    if any(ch.isspace() for ch in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        # Accessing .port raises ValueError for out-of-range / non-numeric ports
        parts.port
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.hostname)


def is_valid_short_code(code: str) -> bool:
    return bool(SHORT_CODE_PATTERN.match(code)) and code not in RESERVED_CODES
