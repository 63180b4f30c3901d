from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShortLink(BaseModel):
    """
    A short code pointing at an original URL.

    Immutable once created: the expiry is fixed at creation time
    (created + validity minutes) and never extended.
    """
    code: str
    original_url: str
    created: datetime
    expiry: datetime

    model_config = ConfigDict(frozen=True)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expiry


class ClickEvent(BaseModel):
    """One recorded redirect visit"""
    timestamp: datetime
    referrer: str = "direct"
    user_agent: Optional[str] = None
    # Best-effort client origin (peer address), not a geolocation
    location: str = "unknown"

    model_config = ConfigDict(frozen=True)


class ClickStats(BaseModel):
    """
    Aggregate and per-visit click data for one short code.

    clicks always equals len(click_data). Mutation goes through
    the store, which holds the per-entry lock.
    """
    clicks: int = 0
    click_data: List[ClickEvent] = Field(default_factory=list)

    def record(self, event: ClickEvent) -> None:
        self.click_data.append(event)
        self.clicks += 1
