"""
Event logger strategies using Strategy Pattern.
Allows switching between log sinks (remote HTTP collector, In-Memory, Null).

Every strategy shares the same front door:
- log()  validates and awaits delivery (errors propagate to the caller)
- emit() validates and delivers in the background (fire and forget)
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Set
import asyncio
import logging

import httpx
from pydantic import ValidationError

from .models import LogRecord


# Local side channel for problems with the remote log pipeline itself
logger = logging.getLogger("shorturl_app.event_log")


class InvalidLogRecordError(ValueError):
    """Raised when stack/level/package fail validation. Nothing is sent."""


class LogDeliveryError(Exception):
    """Raised when the collector is unreachable or answers non-2xx."""


class EventLoggerStrategy(ABC):
    """
    Abstract base class for event logger strategies.

    Subclasses only implement send(); validation and background
    delivery live here so every sink rejects the same records.
    """

    def __init__(self):
        self._pending: Set[asyncio.Task] = set()

    @staticmethod
    def build_record(stack: str, level: str, package: str, message: str) -> LogRecord:
        """
        Validate fields and build a LogRecord.

        Raises:
            InvalidLogRecordError: If any field is outside its allowed set
        """
        try:
            return LogRecord(stack=stack, level=level, package=package, message=message)
        except ValidationError as e:
            raise InvalidLogRecordError(f"Invalid logging parameters: {e}") from e

    async def log(self, stack: str, level: str, package: str, message: str) -> Any:
        """
        Validate and deliver a log event, waiting for the result.

        Returns:
            Whatever the sink returns (collector response body for HTTP)

        Raises:
            InvalidLogRecordError: Record rejected, nothing sent
            LogDeliveryError: Sink failed to accept the record
        """
        record = self.build_record(stack, level, package, message)
        return await self.send(record)

    def emit(self, stack: str, level: str, package: str, message: str) -> None:
        """
        Validate and deliver a log event without waiting for delivery.

        Validation errors are raised immediately. Delivery failures are
        reported to the local logger only.
        """
        record = self.build_record(stack, level, package, message)
        self._dispatch(record)

    @abstractmethod
    async def send(self, record: LogRecord) -> Any:
        """
        Deliver one validated record.

        Args:
            record: LogRecord that already passed validation
        """
        pass

    def _dispatch(self, record: LogRecord) -> None:
        """Schedule send() on the running loop and keep a reference to the task"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, dropping log event: %s", record.message)
            return

        task = loop.create_task(self.send(record))
        self._pending.add(task)
        task.add_done_callback(self._on_delivered)

    def _on_delivered(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Logging failed: %s", error)

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight"""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight deliveries started on the current loop"""
        loop = asyncio.get_running_loop()
        tasks = [t for t in self._pending if t.get_loop() is loop]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Drain pending deliveries and release resources"""
        await self.drain()


class HttpEventLogger(EventLoggerStrategy):
    """
    Remote log collector over HTTP.

    POSTs {stack, level, package, message} as JSON with a bearer token.
    The httpx client is created lazily so it binds to the loop that
    first uses it, and is recreated after aclose().
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize HTTP event logger.

        Args:
            url: Collector endpoint
            token: Bearer token for the Authorization header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. MockTransport in tests)
        """
        super().__init__()
        self.url = url
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def send(self, record: LogRecord) -> Any:
        """POST the record to the collector (async I/O)"""
        client = self._get_client()
        try:
            response = await client.post(self.url, json=record.model_dump())
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise LogDeliveryError(f"Logging failed: {e}") from e

        try:
            return response.json()
        except ValueError:
            return None

    async def aclose(self) -> None:
        await super().aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class InMemoryEventLogger(EventLoggerStrategy):
    """
    In-memory event logger that keeps every record in a list.

    Used in development/testing environments. emit() records
    synchronously since there is no I/O to wait for.
    """

    def __init__(self):
        """Initialize empty record list"""
        super().__init__()
        self.records: List[LogRecord] = []

    async def send(self, record: LogRecord) -> Any:
        """Append record (instant, but async for interface)"""
        self.records.append(record)
        return None

    def _dispatch(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Recorded messages, optionally filtered by level"""
        return [r.message for r in self.records if level is None or r.level == level]

    def clear(self) -> None:
        """Forget all recorded events"""
        self.records.clear()


class NullEventLogger(EventLoggerStrategy):
    """
    Null Object Pattern - logger that drops everything.

    Records are still validated, so invalid calls fail the same way
    they would against the real collector.
    """

    async def send(self, record: LogRecord) -> Any:
        """Pretends to send but does nothing"""
        return None

    def _dispatch(self, record: LogRecord) -> None:
        pass
