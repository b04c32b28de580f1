"""Timezone utilities. All ledger and market times are handled in UTC."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.UTC


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Assume naive datetime is already UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


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


def day_key(dt: datetime) -> str:
    """Return the YYYY-MM-DD string of the UTC day containing dt."""
    return to_utc(dt).strftime("%Y-%m-%d")


def start_of_utc_day(dt: datetime) -> datetime:
    """Return midnight UTC of the UTC day containing dt."""
    return to_utc(dt).replace(hour=0, minute=0, second=0, microsecond=0)
