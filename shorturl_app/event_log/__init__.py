"""
Event log module for URL shortener.
Validates structured log events and forwards them to the log collector.
"""

from .models import LogRecord, VALID_PACKAGES, allowed_packages, package_for
from .strategies import (
    EventLoggerStrategy,
    HttpEventLogger,
    InMemoryEventLogger,
    NullEventLogger,
    InvalidLogRecordError,
    LogDeliveryError,
)
from .factory import EventLoggerFactory, EventLogBackend

__all__ = [
    "LogRecord",
    "VALID_PACKAGES",
    "allowed_packages",
    "package_for",
    "EventLoggerStrategy",
    "HttpEventLogger",
    "InMemoryEventLogger",
    "NullEventLogger",
    "InvalidLogRecordError",
    "LogDeliveryError",
    "EventLoggerFactory",
    "EventLogBackend",
]
