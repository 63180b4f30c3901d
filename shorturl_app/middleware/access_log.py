"""Access log middleware."""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shorturl_app.event_log.strategies import EventLoggerStrategy


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Emit one log event per response: method, path and status.

    The event is emitted once the status is known and before the
    response body is streamed to the client. Delivery is fire and
    forget, so a slow or failing collector never delays the response.
    """

    def __init__(self, app, logger_provider: Callable[[], EventLoggerStrategy], stack: str = "backend"):
        """
        Initialize access log middleware.

        Args:
            app: ASGI app
            logger_provider: Returns the event logger to use (resolved per request)
            stack: Stack name attached to the events
        """
        super().__init__(app)
        self.logger_provider = logger_provider
        self.stack = stack

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        self.logger_provider().emit(
            self.stack,
            "info",
            "middleware",
            f"Request: {request.method} {request.url.path} - Response Status: {response.status_code}",
        )

        return response
