from pydantic import BaseModel, Field, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime, timezone


def to_iso(dt: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix (2026-10-19T10:00:00.000Z)"""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class URLCreate(BaseModel):
    """Request body for POST /shorturls

    url is optional here so that a missing URL is reported as
    "Invalid URL" (400) by the service rather than as a schema error.
    """
    url: Optional[str] = Field(None, description="The original URL to be shortened")
    validity: Optional[int] = Field(None, description="Minutes until expiry (default 30)")
    shortcode: Optional[str] = Field(None, description="Custom short code")


class URLCreateResponse(CamelModel):
    short_link: str
    expiry: datetime

    @field_serializer("expiry")
    def serialize_expiry(self, value: datetime) -> str:
        return to_iso(value)


class ClickData(CamelModel):
    """One click as exposed by the stats endpoint (reads ClickEvent attributes)"""
    timestamp: datetime
    referrer: str
    user_agent: Optional[str] = None
    location: str

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)


class URLStats(CamelModel):
    original_url: str
    created: datetime
    expiry: datetime
    total_clicks: int
    click_data: List[ClickData]

    @field_serializer("created", "expiry")
    def serialize_dates(self, value: datetime) -> str:
        return to_iso(value)
