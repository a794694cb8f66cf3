"""Time context resolver - UTC instants to civil time in the user's zone.

All classifier comparisons go through this module. Weeks start on Monday.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .tasks import as_utc

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"

TIMEZONE_OPTIONS = [
    ("America/New_York", "Eastern Time (ET)"),
    ("America/Chicago", "Central Time (CT)"),
    ("America/Denver", "Mountain Time (MT)"),
    ("America/Los_Angeles", "Pacific Time (PT)"),
    ("America/Anchorage", "Alaska Time (AKT)"),
    ("Pacific/Honolulu", "Hawaii Time (HST)"),
    ("Europe/London", "Greenwich Mean Time (GMT)"),
    ("Europe/Paris", "Central European Time (CET)"),
    ("Asia/Tokyo", "Japan Standard Time (JST)"),
    ("Asia/Shanghai", "China Standard Time (CST)"),
    ("Asia/Kolkata", "India Standard Time (IST)"),
    ("Australia/Sydney", "Australian Eastern Time (AET)"),
    ("Pacific/Auckland", "New Zealand Standard Time (NZST)"),
]

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache(maxsize=None)
def resolve_zone(name: str | None) -> ZoneInfo:
    """
    Resolve an IANA zone name.

    Unknown or malformed names fall back to DEFAULT_TIMEZONE with a warning.
    Cached, so each bad value is only reported once.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
    logger.warning(f"Invalid timezone {name!r}, falling back to {DEFAULT_TIMEZONE}")
    return ZoneInfo(DEFAULT_TIMEZONE)


def now(tz_name: str | None, clock: Clock | None = None) -> datetime:
    """Current civil time in the zone. The clock must return an aware datetime."""
    current = (clock or utc_clock)()
    return as_utc(current).astimezone(resolve_zone(tz_name))


def in_zone(current: datetime, tz_name: str | None) -> datetime:
    """
    Express a supplied "now" as civil time in the zone.

    Naive values are taken to already be civil time in that zone.
    """
    zone = resolve_zone(tz_name)
    if current.tzinfo is None:
        return current.replace(tzinfo=zone)
    return current.astimezone(zone)


def round_up_minute(value: datetime) -> datetime:
    """Round a sub-minute value up to the next whole minute (14:00:00.5 -> 14:01)."""
    if value.second or value.microsecond:
        return value.replace(second=0, microsecond=0) + timedelta(minutes=1)
    return value


def to_zone(instant: datetime, tz_name: str | None) -> datetime:
    """
    Convert a stored instant to civil time in the zone.

    Any sub-minute component is rounded up to the next minute before the
    value is compared.
    """
    # Rounded in UTC so the fold of an ambiguous local hour is kept
    return round_up_minute(as_utc(instant)).astimezone(resolve_zone(tz_name))


def local_midnight(day: date, tz_name: str | None) -> datetime:
    """Civil midnight of a date in the zone."""
    return datetime.combine(day, time(0, 0), tzinfo=resolve_zone(tz_name))


def at_time_of_day(day: date, time_of_day: time, tzinfo) -> datetime:
    """Combine a civil date with a wall-clock time in the given zone."""
    return datetime.combine(day, time_of_day.replace(tzinfo=None), tzinfo=tzinfo)


def start_of_week(dt: datetime) -> datetime:
    """Monday 00:00 of the week containing dt, in dt's zone."""
    monday = dt.date() - timedelta(days=dt.weekday())
    return datetime.combine(monday, time(0, 0), tzinfo=dt.tzinfo)


def end_of_week(dt: datetime) -> datetime:
    """Sunday 23:59:59.999999 of the week containing dt, in dt's zone."""
    sunday = dt.date() + timedelta(days=6 - dt.weekday())
    return datetime.combine(sunday, time.max, tzinfo=dt.tzinfo)


def is_before(a: datetime, b: datetime) -> bool:
    """
    Order two local datetimes by the instant they name.

    Datetimes sharing a ZoneInfo compare by wall clock and ignore fold, so
    1:45 EDT would sort after 1:30 EST on the fall-back night.
    """
    return as_utc(a) < as_utc(b)


def same_day(a: datetime, b: datetime) -> bool:
    return a.date() == b.date()


def in_week(value: datetime, current: datetime) -> bool:
    """True if value falls within the Monday-Sunday week of current."""
    return as_utc(start_of_week(current)) <= as_utc(value) <= as_utc(end_of_week(current))
