"""
URL store module.

Implements the Strategy Pattern for the link + click-stats store.
The store is injected into services (never used as a module global).
"""

from .strategies import URLStoreStrategy, InMemoryURLStore
from .factory import URLStoreFactory, URLStoreBackend

__all__ = [
    "URLStoreStrategy",
    "InMemoryURLStore",
    "URLStoreFactory",
    "URLStoreBackend",
]
