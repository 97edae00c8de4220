"""
Wall-clock and calendar-day helpers.

Times of day are plain integers counting minutes since midnight. Every
component that needs a day boundary or a weekday goes through the helpers in
this module so the rules stay identical everywhere.
"""

import re
from datetime import date
from typing import Tuple, Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidFormatError

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def to_minutes(value: str) -> int:
    """
    Convert an ``"HH:MM"`` string to minutes since midnight.

    Raises:
        InvalidFormatError: If the value is not a valid 24-hour time
    """
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise InvalidFormatError(f"Invalid time format (HH:MM): {value!r}")

    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def to_time_string(minutes: int) -> str:
    """
    Convert minutes since midnight to a zero-padded ``"HH:MM"`` string.

    Output is always the canonical padded form, so ``to_minutes`` accepts
    ``"9:00"`` but formatting it back yields ``"09:00"``. Out-of-range values
    are a caller bug and are rejected rather than wrapped.
    """
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes must be between 0 and {MINUTES_PER_DAY - 1}, got {minutes}")

    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def calendar_day(value: Union[str, date], tz: str = "UTC") -> Date:
    """
    Normalize a date, datetime or date string to a calendar date.

    Any time-of-day component is dropped. Datetimes, parsed or given, are
    first converted to ``tz`` so the day is the one observed in the
    configured locale. Strings that hold only a time or a duration are
    rejected.
    """
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value.strip(), tz=tz, exact=True)
        except ValueError as exc:
            raise InvalidFormatError(f"Invalid date: {value!r}") from exc

        if not isinstance(parsed, (Date, DateTime)):
            raise InvalidFormatError(f"Invalid date: {value!r} is not a calendar date")
        value = parsed

    if isinstance(value, DateTime):
        local = value.in_timezone(tz)
        return pendulum.date(local.year, local.month, local.day)

    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    raise InvalidFormatError(f"Invalid date: {value!r}")


def day_bounds(day: date, tz: str = "UTC") -> Tuple[DateTime, DateTime]:
    """Return the first and the last instant of ``day`` in ``tz``."""
    start = pendulum.datetime(day.year, day.month, day.day, tz=tz)
    return start, start.end_of("day")


def weekday_index(day: date) -> int:
    """Return the weekday of ``day`` with 0=Sunday through 6=Saturday."""
    return day.isoweekday() % 7
