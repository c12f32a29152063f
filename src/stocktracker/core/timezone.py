"""Timezone utilities. All timestamps in the engine are UTC."""

from datetime import date, datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

from stocktracker.core.exceptions import ValidationError

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


def parse_datetime_utc(value: Union[str, date, datetime]) -> datetime:
    """
    Coerce a datetime, date or string into an aware UTC datetime.

    Plain dates become midnight UTC. Strings without a timezone are assumed UTC.
    Anything else, or an unparseable string, raises ValidationError.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return UTC.localize(datetime(value.year, value.month, value.day))
    if not isinstance(value, str):
        raise ValidationError(f"Expected a date or datetime, got {value!r}")
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Not a valid date: {value!r}") from exc
    return to_utc(parsed)
