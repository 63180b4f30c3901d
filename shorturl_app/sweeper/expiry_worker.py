"""
Expiry Sweeper

Background task that removes expired short URLs from the store.

Policy:
- Expired links keep answering 410 for `retention` after their expiry
- Once past expiry + retention, the link and its click stats are
  deleted and the code answers 404 (and becomes free again)
- With no retention configured the sweeper is not started and expired
  links stay in memory for the life of the process
"""

import asyncio
from datetime import timedelta

from shorturl_app.services.url_service import URLService


class ExpirySweeper:
    """
    Periodic purge of expired links.

    Runs inside the application's event loop (started from the
    FastAPI lifespan), so it needs no signal handling of its own.
    """

    def __init__(
        self,
        url_service: URLService,
        retention: timedelta,
        interval: float = 60
    ):
        """
        Initialize sweeper with dependencies.

        Args:
            url_service: Service owning the store to sweep
            retention: How long expired links are kept before removal
            interval: Seconds between sweeps
        """
        self.url_service = url_service
        self.retention = retention
        self.interval = interval
        self.running = False
        self.purged_count = 0

    async def sweep_once(self) -> int:
        """Run a single sweep. Returns the number of links removed."""
        removed = await self.url_service.delete_expired(self.retention)
        self.purged_count += removed
        return removed

    async def start(self):
        """Sweep every `interval` seconds until stopped or cancelled"""
        self.running = True
        print(f"🧹 Expiry sweeper started (interval {self.interval}s, retention {self.retention})")

        while self.running:
            try:
                await asyncio.sleep(self.interval)
                removed = await self.sweep_once()
                if removed:
                    print(f"🧹 Purged {removed} expired links. Total: {self.purged_count}")

            except asyncio.CancelledError:
                break
            except Exception as e:
                print(f"❌ Sweep failed: {e}")
                self.url_service.log_event("error", f"Expiry sweep failed: {e}", package="cron job")

        self.running = False
        print("🛑 Expiry sweeper stopped")

    def stop(self):
        """Stop the sweeper after the current sleep"""
        self.running = False
