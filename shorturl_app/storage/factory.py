"""
Factory for creating URL store instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
from .strategies import URLStoreStrategy, InMemoryURLStore


class URLStoreBackend(Enum):
    """Available URL store backends"""
    MEMORY = "memory"


class URLStoreFactory:
    """
    Simple factory for creating URL store instances.

    Uses Singleton Pattern - the store is the single owner of all
    links for the lifetime of the process.
    """

    _instance: URLStoreStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: URLStoreBackend) -> URLStoreStrategy:
        """
        Create or return cached URL store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton store instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == URLStoreBackend.MEMORY:
            cls._instance = InMemoryURLStore()
            print("✅ In-memory URL store initialized")

        else:
            raise ValueError(f"Unknown URL store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
