"""
Test configuration and fixtures for FastAPI URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import os

# Settings are loaded at import time and require the log collector
# credentials; events are kept in memory instead of being sent.
os.environ.setdefault("LOG_API_URL", "http://logs.test/evaluation-service/logs")
os.environ.setdefault("AUTH_TOKEN", "test-token")
os.environ["EVENT_LOG_BACKEND"] = "memory"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from shorturl_app.dependencies import get_url_store, get_event_logger, get_clock
from shorturl_app.event_log.strategies import InMemoryEventLogger
from shorturl_app.services.url_service import URLService
from shorturl_app.storage.strategies import InMemoryURLStore


class FakeClock:
    """Controllable clock: call it for "now", advance() to move time forward"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def url_store():
    """Fresh, empty store for each test"""
    return InMemoryURLStore()


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def event_logger():
    """
    The app-wide in-memory event logger, emptied for each test.
    Shared with the access log middleware, which resolves it directly.
    """
    events = get_event_logger()
    assert isinstance(events, InMemoryEventLogger)
    events.clear()
    yield events
    events.clear()


@pytest.fixture(scope="function")
def url_service(url_store, event_logger, clock):
    """URL service wired to the per-test store and clock"""
    return URLService(store=url_store, events=event_logger, clock=clock)


@pytest.fixture(scope="function")
def client(url_store, event_logger, clock):
    """
    Create a test client with store and clock dependencies overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_url_store] = lambda: url_store
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
