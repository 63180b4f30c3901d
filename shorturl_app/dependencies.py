"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the URL store and the
event logger that are injected into services and routes.

Pattern: Dependency Injection
- The store is an owned object passed into the service, not a module global
- Easy to test (override get_url_store / get_clock with fresh instances)
- Flexible (swap implementations via config)
"""

from datetime import datetime
from functools import lru_cache
from typing import Callable

from fastapi import Depends

from shorturl_app.storage.factory import URLStoreFactory, URLStoreBackend
from shorturl_app.event_log.factory import EventLoggerFactory, EventLogBackend
from shorturl_app.storage.strategies import URLStoreStrategy
from shorturl_app.event_log.strategies import EventLoggerStrategy
from shorturl_app.services.short_code_strategies import ShortCodeStrategy, RandomShortCodeStrategy
from shorturl_app.services.url_service import URLService, utc_now
from shorturl_app.config import settings


@lru_cache()
def get_url_store() -> URLStoreStrategy:
    """
    Get URL store instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = URLStoreBackend(settings.url_store_backend)
    return URLStoreFactory.create(backend)


@lru_cache()
def get_event_logger() -> EventLoggerStrategy:
    """
    Get event logger instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = EventLogBackend(settings.event_log_backend)
    return EventLoggerFactory.create(backend)


@lru_cache()
def get_short_code_strategy() -> ShortCodeStrategy:
    """
    Get short code generator (singleton).

    Code length and retry budget come from settings.
    """
    return RandomShortCodeStrategy(
        length=settings.short_url_length,
        max_retries=settings.max_retries,
    )


def get_clock() -> Callable[[], datetime]:
    """Current-time provider (overridden in tests to move past expiry)"""
    return utc_now


def get_url_service(
    store: URLStoreStrategy = Depends(get_url_store),
    events: EventLoggerStrategy = Depends(get_event_logger),
    clock: Callable[[], datetime] = Depends(get_clock),
    short_code_strategy: ShortCodeStrategy = Depends(get_short_code_strategy)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controller depends on service, service depends on store, logger
    and code generator.
    """
    return URLService(
        store=store,
        events=events,
        clock=clock,
        short_code_strategy=short_code_strategy,
    )
