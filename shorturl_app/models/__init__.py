"""
Domain models for URL shortener.

Links and their click statistics live in the URL store (in-memory),
keyed by the same short code. Nothing here is persisted across restarts.
"""

from .url import ShortLink, ClickEvent, ClickStats

__all__ = ["ShortLink", "ClickEvent", "ClickStats"]
