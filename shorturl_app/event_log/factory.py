"""
Factory for creating event logger instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
from .strategies import EventLoggerStrategy, HttpEventLogger, InMemoryEventLogger, NullEventLogger
from shorturl_app.config import settings


class EventLogBackend(Enum):
    """Available event log backends"""
    HTTP = "http"
    MEMORY = "memory"
    NULL = "null"


class EventLoggerFactory:
    """
    Simple factory for creating event logger instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: EventLoggerStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: EventLogBackend) -> EventLoggerStrategy:
        """
        Create or return cached event logger instance.

        Args:
            backend: Type of event log backend (from enum)

        Returns:
            Singleton event logger instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == EventLogBackend.HTTP:
            cls._instance = HttpEventLogger(
                url=settings.log_api_url,
                token=settings.auth_token,
                timeout=settings.log_timeout_seconds,
            )
            print(f"✅ HTTP event logger initialized ({settings.log_api_url})")

        elif backend == EventLogBackend.MEMORY:
            cls._instance = InMemoryEventLogger()
            print("✅ In-memory event logger initialized")

        elif backend == EventLogBackend.NULL:
            cls._instance = NullEventLogger()
            print("✅ Null event logger initialized")

        else:
            raise ValueError(f"Unknown event log backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
