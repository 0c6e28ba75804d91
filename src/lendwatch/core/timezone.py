"""Timezone utilities. All cache timestamps are UTC."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Assume naive datetime is already UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def to_epoch_ms(dt: datetime) -> int:
    """Return milliseconds since the Unix epoch for a datetime."""
    return int(round(to_utc(dt).timestamp() * 1000))


def from_epoch_ms(value: int) -> datetime:
    """Build a UTC datetime from milliseconds since the Unix epoch."""
    return datetime.fromtimestamp(value / 1000, UTC)


def parse_datetime_utc(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in UTC.

    If no timezone is provided in the string, assumes UTC.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or UTC
        dt = tz.localize(dt)
    return to_utc(dt)
