import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from shorturl_app.models.url import ShortLink, ClickEvent
from shorturl_app.schemas.url import URLCreateResponse, URLStats, ClickData
from shorturl_app.config import settings
from shorturl_app.services.exceptions import (
    InvalidURLError,
    InvalidValidityError,
    InvalidShortCodeError,
    ShortCodeExistsError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
)
from shorturl_app.services.short_code_strategies import (
    ShortCodeStrategy,
    RandomShortCodeStrategy,
    ShortCodeGenerationError,
)
from shorturl_app.services.url_validator import is_valid_url, is_valid_short_code, RESERVED_CODES
from shorturl_app.storage.strategies import URLStoreStrategy
from shorturl_app.event_log.models import package_for
from shorturl_app.event_log.strategies import EventLoggerStrategy, InvalidLogRecordError


side_channel = logging.getLogger("shorturl_app.event_log")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class URLService:
    """
    URL Service with dependency injection for the store and event logger.

    This follows the Dependency Injection pattern:
    - Store and event logger are injected (not created internally)
    - Clock is injectable so expiry can be tested without sleeping

    Expected failures are raised as ShortURLError subclasses; each one
    is logged here before it is raised.
    """

    def __init__(
        self,
        store: URLStoreStrategy,
        events: EventLoggerStrategy,
        clock: Callable[[], datetime] = utc_now,
        short_code_strategy: Optional[ShortCodeStrategy] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            store: URL store holding links and click stats
            events: Event logger (fire-and-forget delivery)
            clock: Returns the current UTC time
            short_code_strategy: Generator for codes the caller didn't supply
        """
        self.store = store
        self.events = events
        self.clock = clock
        self.short_code_strategy = short_code_strategy or RandomShortCodeStrategy(
            length=settings.short_url_length,
            max_retries=settings.max_retries,
        )

    def log_event(self, level: str, message: str, package: str = "handler") -> None:
        """
        Emit a log event without waiting for delivery.

        Packages the configured stack doesn't allow fall back to "utils".
        A record that still fails validation is reported on the local
        side channel; it never fails the request that produced it.
        """
        stack = settings.log_stack
        try:
            self.events.emit(stack, level, package_for(stack, package), message)
        except InvalidLogRecordError as e:
            side_channel.warning("Dropping invalid log event %r: %s", message, e)

    def _is_taken(self, code: str) -> bool:
        return code in RESERVED_CODES or self.store.exists(code)

    async def create_short_url(
        self,
        url: Optional[str],
        host: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None
    ) -> URLCreateResponse:
        """Create a new short URL

        Process:
        1. Validate URL, validity and custom short code
        2. Resolve the code (custom, or generated with collision checks)
        3. Insert link + empty stats atomically (insert-if-absent)
        4. Build shortLink from the request host

        Generated codes are checked against the store just like
        custom ones, so a generated code never overwrites a link.
        """
        if not url or not is_valid_url(url):
            self.log_event("error", "Invalid URL provided")
            raise InvalidURLError()

        if validity is None:
            validity = settings.default_validity_minutes
        if validity <= 0:
            self.log_event("error", f"Invalid validity provided: {validity}")
            raise InvalidValidityError()

        if shortcode and not is_valid_short_code(shortcode):
            self.log_event("error", "Invalid shortcode provided")
            raise InvalidShortCodeError()

        code = shortcode or self.short_code_strategy.generate(self._is_taken)

        created = self.clock()
        link = ShortLink(
            code=code,
            original_url=url,
            created=created,
            expiry=created + timedelta(minutes=validity),
        )

        # Check-then-insert happens under the store lock
        if not self.store.add(link):
            if shortcode:
                self.log_event("error", "Requested shortcode already exists")
                raise ShortCodeExistsError()
            raise ShortCodeGenerationError(f"Generated short code collided: {code}")

        self.log_event("info", f"Short URL created: {code}")

        return URLCreateResponse(
            short_link=f"{settings.public_scheme}://{host}/{code}",
            expiry=link.expiry,
        )

    async def get_url_stats(self, short_code: str) -> URLStats:
        """Get statistics for a short URL

        Expired links answer 410 but are not removed here;
        removal is the expiry sweeper's job.
        """
        link = self.store.get_link(short_code)
        stats = self.store.get_stats(short_code)

        if not link or not stats:
            self.log_event("warn", f"Shortcode not found: {short_code}")
            raise ShortURLNotFoundError()

        if link.is_expired(self.clock()):
            self.log_event("info", f"Expired shortcode accessed: {short_code}")
            raise ShortURLExpiredError()

        return URLStats(
            original_url=link.original_url,
            created=link.created,
            expiry=link.expiry,
            total_clicks=stats.clicks,
            click_data=[
                ClickData(
                    timestamp=event.timestamp,
                    referrer=event.referrer,
                    user_agent=event.user_agent,
                    location=event.location,
                )
                for event in stats.click_data
            ],
        )

    async def get_long_url_for_redirect(
        self,
        short_code: str,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
        location: Optional[str] = None
    ) -> str:
        """
        Record a visit and return the original URL.

        The click is recorded before returning, so a stats call made
        after the redirect response always sees it.
        """
        link = self.store.get_link(short_code)

        if not link:
            self.log_event("warn", f"Shortcode not found for redirect: {short_code}")
            raise ShortURLNotFoundError()

        now = self.clock()
        if link.is_expired(now):
            self.log_event("info", f"Expired shortcode redirect attempted: {short_code}")
            raise ShortURLExpiredError()

        event = ClickEvent(
            timestamp=now,
            referrer=referrer or "direct",
            user_agent=user_agent,
            location=location or "unknown",
        )
        if self.store.record_click(short_code, event) is None:
            # Swept between lookup and update
            self.log_event("warn", f"Shortcode not found for redirect: {short_code}")
            raise ShortURLNotFoundError()

        self.log_event("info", f"Redirect performed for: {short_code}")
        return link.original_url

    async def delete_expired(self, retention: timedelta) -> int:
        """
        Purge links that expired more than `retention` ago.

        Returns:
            Number of links removed
        """
        removed = self.store.purge_expired(self.clock(), retention)
        if removed:
            self.log_event("info", f"Purged {len(removed)} expired short URLs", package="cron job")
        return len(removed)
