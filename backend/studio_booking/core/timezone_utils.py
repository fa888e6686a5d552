"""
Timezone utilities for the studio booking backend.

Bookings are stored and exchanged as absolute UTC instants. Availability
rules are wall-clock times interpreted in the studio's configured timezone.
"""

from datetime import date, datetime, time, timedelta, timezone
import re
from typing import TYPE_CHECKING, Tuple

import pytz

if TYPE_CHECKING:
    from studio_booking.models.studio import Studio

HHMM_REGEX = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are treated as UTC (SQLite drops tzinfo on read).
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_studio_timezone(studio: "Studio") -> pytz.BaseTzInfo:
    """
    Get the studio's timezone.

    Args:
        studio: Studio object (always has timezone field)

    Returns:
        Studio timezone as pytz timezone object
    """
    return pytz.timezone(studio.timezone)


def parse_wall_clock(value: str) -> time:
    """
    Parse an ``HH:MM`` 24h wall-clock string.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    match = HHMM_REGEX.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time format: {value!r} (expected HH:MM)")
    return time(int(match.group(1)), int(match.group(2)))


def format_wall_clock(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def localize_wall_clock(day: date, wall_clock: time, tz: pytz.BaseTzInfo) -> datetime:
    """Combine a calendar date and wall-clock time in ``tz``, returned as UTC."""
    local_dt = tz.localize(datetime.combine(day, wall_clock))
    return local_dt.astimezone(timezone.utc)


def local_day_bounds(day: date, tz: pytz.BaseTzInfo) -> Tuple[datetime, datetime]:
    """Return [start, end) of a local calendar day as UTC instants."""
    start = localize_wall_clock(day, time(0, 0), tz)
    end = localize_wall_clock(day + timedelta(days=1), time(0, 0), tz)
    return start, end


def js_day_of_week(day: date) -> int:
    """Day of week with 0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


def hours_between(start: datetime, end: datetime) -> float:
    """Signed number of hours from ``start`` to ``end``."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600
