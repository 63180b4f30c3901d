"""
Tests for the event logger (validation, HTTP delivery, fire-and-forget).
"""
import asyncio
import json
import logging

import httpx
import pytest

from shorturl_app.event_log.models import LogRecord, allowed_packages, package_for
from shorturl_app.event_log.strategies import (
    HttpEventLogger,
    InMemoryEventLogger,
    NullEventLogger,
    InvalidLogRecordError,
    LogDeliveryError,
)
from shorturl_app.event_log.factory import EventLoggerFactory, EventLogBackend


COLLECTOR_URL = "http://collector.test/logs"


def make_logger(handler) -> HttpEventLogger:
    return HttpEventLogger(
        url=COLLECTOR_URL,
        token="secret-token",
        transport=httpx.MockTransport(handler),
    )


class TestLogRecordValidation:
    """Test stack / level / package enumerations"""

    def test_backend_package(self):
        record = LogRecord(stack="backend", level="info", package="handler", message="ok")
        assert record.model_dump() == {
            "stack": "backend", "level": "info", "package": "handler", "message": "ok"
        }

    def test_common_package_allowed_for_both_stacks(self):
        for stack in ("backend", "frontend"):
            LogRecord(stack=stack, level="debug", package="middleware", message="m")

    def test_allowed_packages(self):
        assert "cron job" in allowed_packages("backend")
        assert "component" in allowed_packages("frontend")
        assert "handler" not in allowed_packages("frontend")
        assert "config" in allowed_packages("frontend")

    def test_package_for_falls_back_to_utils(self):
        assert package_for("backend", "handler") == "handler"
        assert package_for("frontend", "handler") == "utils"
        assert package_for("frontend", "cron job") == "utils"
        assert package_for("frontend", "middleware") == "middleware"

    @pytest.mark.parametrize("stack,level,package", [
        ("middle", "info", "handler"),       # unknown stack
        ("backend", "verbose", "handler"),   # unknown level
        ("backend", "info", "component"),    # frontend-only package
        ("frontend", "info", "db"),          # backend-only package
        ("backend", "info", "nonsense"),
    ])
    def test_rejected(self, stack, level, package):
        with pytest.raises(InvalidLogRecordError):
            InMemoryEventLogger.build_record(stack, level, package, "message")


class TestHttpEventLogger:
    """Test delivery to the remote collector"""

    def test_posts_record_with_bearer_token(self):
        """Test JSON body and Authorization header"""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"logID": "42", "message": "log created"})

        logger = make_logger(handler)

        async def run():
            try:
                return await logger.log("backend", "info", "handler", "Short URL created: abc")
            finally:
                await logger.aclose()

        result = asyncio.run(run())

        assert result == {"logID": "42", "message": "log created"}
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == COLLECTOR_URL
        assert request.headers["authorization"] == "Bearer secret-token"
        assert json.loads(request.content) == {
            "stack": "backend",
            "level": "info",
            "package": "handler",
            "message": "Short URL created: abc",
        }

    def test_invalid_record_is_never_sent(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200)

        logger = make_logger(handler)

        with pytest.raises(InvalidLogRecordError):
            asyncio.run(logger.log("backend", "loud", "handler", "nope"))
        assert seen == []

    def test_non_2xx_raises(self):
        logger = make_logger(lambda request: httpx.Response(401, json={"message": "bad token"}))

        with pytest.raises(LogDeliveryError):
            asyncio.run(logger.log("backend", "error", "handler", "boom"))

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        logger = make_logger(handler)

        with pytest.raises(LogDeliveryError):
            asyncio.run(logger.log("backend", "error", "handler", "boom"))

    def test_empty_body_returns_none(self):
        logger = make_logger(lambda request: httpx.Response(204))
        assert asyncio.run(logger.log("backend", "debug", "utils", "quiet")) is None


class TestFireAndForget:
    """Test emit() does not wait for delivery"""

    def test_emit_returns_before_delivery(self):
        """Test emit schedules delivery and drain waits for it"""
        delivered = []

        async def run():
            release = asyncio.Event()

            async def handler(request):
                await release.wait()
                delivered.append(json.loads(request.content)["message"])
                return httpx.Response(200, json={})

            logger = make_logger(handler)
            logger.emit("backend", "info", "middleware", "Request: GET / - Response Status: 200")

            assert logger.pending == 1
            await asyncio.sleep(0)
            assert delivered == []

            release.set()
            await logger.aclose()
            assert logger.pending == 0

        asyncio.run(run())
        assert delivered == ["Request: GET / - Response Status: 200"]

    def test_delivery_failure_goes_to_side_channel(self, caplog):
        """Test failures are logged locally and not raised"""
        logger = make_logger(lambda request: httpx.Response(503))

        async def run():
            logger.emit("backend", "info", "handler", "lost")
            await logger.aclose()

        with caplog.at_level(logging.ERROR, logger="shorturl_app.event_log"):
            asyncio.run(run())

        assert any("Logging failed" in r.getMessage() for r in caplog.records)

    def test_emit_validates_immediately(self):
        logger = make_logger(lambda request: httpx.Response(200))

        async def run():
            logger.emit("backend", "info", "component", "wrong package")

        with pytest.raises(InvalidLogRecordError):
            asyncio.run(run())
        assert logger.pending == 0

    def test_emit_without_loop_is_dropped(self, caplog):
        logger = make_logger(lambda request: httpx.Response(200))

        with caplog.at_level(logging.WARNING, logger="shorturl_app.event_log"):
            logger.emit("backend", "info", "handler", "outside loop")

        assert logger.pending == 0
        assert any("dropping log event" in r.getMessage() for r in caplog.records)


class TestOtherLoggers:

    def test_in_memory_records(self):
        logger = InMemoryEventLogger()
        logger.emit("backend", "warn", "handler", "one")
        asyncio.run(logger.log("frontend", "info", "page", "two"))

        assert logger.messages() == ["one", "two"]
        assert logger.messages("warn") == ["one"]

    def test_null_logger_still_validates(self):
        logger = NullEventLogger()
        logger.emit("backend", "info", "handler", "dropped")
        with pytest.raises(InvalidLogRecordError):
            logger.emit("backend", "info", "page", "invalid")


class TestEventLoggerFactory:

    def test_creates_http_logger_from_settings(self):
        EventLoggerFactory.clear_instance()
        try:
            logger = EventLoggerFactory.create(EventLogBackend.HTTP)
            assert isinstance(logger, HttpEventLogger)
            assert logger.url
            assert logger.token
        finally:
            EventLoggerFactory.clear_instance()

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            EventLogBackend("syslog")
