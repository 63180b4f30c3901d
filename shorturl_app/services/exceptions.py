"""
Domain errors raised by URLService.

Each error carries the HTTP status and the message shown to the client;
main.py renders them as {"error": message}.
"""

from typing import Optional


class ShortURLError(Exception):
    """Base class for expected, client-visible failures"""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidURLError(ShortURLError):
    status_code = 400
    message = "Invalid URL"


class InvalidValidityError(ShortURLError):
    status_code = 400
    message = "Invalid validity"


class InvalidShortCodeError(ShortURLError):
    status_code = 400
    message = "Invalid shortcode"


class ShortCodeExistsError(ShortURLError):
    status_code = 409
    message = "Shortcode already exists"


class ShortURLNotFoundError(ShortURLError):
    status_code = 404
    message = "Short URL not found"


class ShortURLExpiredError(ShortURLError):
    status_code = 410
    message = "Short URL has expired"
