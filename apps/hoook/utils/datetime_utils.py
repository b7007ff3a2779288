"""
Datetime utility functions.
Calendar helpers for the feed time windows and the injectable clock.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Union
import pytz

from hoook.utils.constants import FIRST_WEEKDAY

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def get_timezone(tz: Union[str, pytz.BaseTzInfo]) -> pytz.BaseTzInfo:
    """Resolve a timezone name (e.g. "America/Chicago") to a pytz timezone."""
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def to_local(value: datetime, tz: Union[str, pytz.BaseTzInfo]) -> datetime:
    """
    Convert a datetime into the given timezone.

    Naive datetimes are treated as UTC, matching how game times are stored.
    """
    zone = get_timezone(tz)
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value.astimezone(zone)


def is_same_day(a: datetime, b: datetime, tz: Union[str, pytz.BaseTzInfo]) -> bool:
    """True when both datetimes fall on the same calendar day in ``tz``."""
    return to_local(a, tz).date() == to_local(b, tz).date()


def is_next_day(value: datetime, now: datetime, tz: Union[str, pytz.BaseTzInfo]) -> bool:
    """True when ``value`` falls on the calendar day after ``now`` in ``tz``."""
    return to_local(value, tz).date() == to_local(now, tz).date() + timedelta(days=1)


def week_start(value: datetime, tz: Union[str, pytz.BaseTzInfo], first_weekday: int = FIRST_WEEKDAY) -> date:
    """
    First local calendar day of the week containing ``value``.

    Args:
        value: Datetime to locate
        tz: Timezone whose calendar is used
        first_weekday: Python weekday the week starts on (6 = Sunday, 0 = Monday)

    Returns:
        The local date the week starts on
    """
    local_day = to_local(value, tz).date()
    return local_day - timedelta(days=(local_day.weekday() - first_weekday) % 7)


def is_same_week(
    a: datetime, b: datetime, tz: Union[str, pytz.BaseTzInfo], first_weekday: int = FIRST_WEEKDAY
) -> bool:
    """
    True when both datetimes fall in the same calendar week in ``tz``.

    Weeks run Sunday through Saturday by default. Comparing start dates keeps
    weeks that straddle a new year together.
    """
    return week_start(a, tz, first_weekday) == week_start(b, tz, first_weekday)


def is_weekend(value: datetime, tz: Union[str, pytz.BaseTzInfo]) -> bool:
    """True for Saturday or Sunday in ``tz`` (Python weekday 5 or 6)."""
    return to_local(value, tz).weekday() >= 5


def start_of_day(value: datetime, tz: Union[str, pytz.BaseTzInfo]) -> datetime:
    """Local midnight of the day containing ``value``, as an aware datetime."""
    zone = get_timezone(tz)
    local = to_local(value, zone)
    return zone.localize(datetime(local.year, local.month, local.day))


def add_weeks(value: datetime, weeks: int, tz: Union[str, pytz.BaseTzInfo]) -> datetime:
    """
    Advance ``value`` by whole weeks keeping the local wall-clock time.

    A 6pm game stays at 6pm across a daylight-saving change.
    """
    zone = get_timezone(tz)
    local = to_local(value, zone).replace(tzinfo=None)
    return zone.localize(local + timedelta(weeks=weeks))
