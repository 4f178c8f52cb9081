"""
Timezone helpers shared by the domain and the boundary layers.

All wall-clock values in a schedule are interpreted in the schedule's own
IANA zone. These helpers are the only place where a calendar date plus a
wall-clock time turns into an absolute instant.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time

import pendulum
from pendulum import DateTime
from pendulum.tz.exceptions import InvalidTimezone
from pendulum.tz.timezone import Timezone

from .exceptions import InvalidTimezoneError, MalformedTimeError

DEFAULT_TIMEZONE = "Africa/Lagos"

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

# "HH:MM" or "HH:MM:SS", as stored in the schedule tables
_WALL_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def ensure_timezone(name: str) -> Timezone:
    """
    Resolve an IANA zone name.

    Raises:
        InvalidTimezoneError: If the name is not a string or not a known zone
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(f"Invalid timezone: {name!r}")

    try:
        return pendulum.timezone(name.strip())
    except (InvalidTimezone, ValueError) as exc:
        raise InvalidTimezoneError(f"Unknown timezone: {name!r}") from exc


def validate_timezone(name: str) -> bool:
    """Return True if ``name`` is a usable IANA zone."""
    try:
        ensure_timezone(name)
    except InvalidTimezoneError:
        return False
    return True


def parse_wall_clock(value: time | str) -> time:
    """
    Parse a wall-clock time given as ``time``, "HH:MM" or "HH:MM:SS".

    Seconds are accepted but dropped; schedules work at minute granularity.
    """
    if isinstance(value, time):
        if value.tzinfo is not None:
            raise MalformedTimeError(f"Wall-clock time must not carry a timezone: {value}")
        return value.replace(second=0, microsecond=0)

    if not isinstance(value, str):
        raise MalformedTimeError(f"Expected a wall-clock time string, got {value!r}")

    match = _WALL_CLOCK_PATTERN.match(value.strip())
    if not match:
        raise MalformedTimeError(f"Cannot parse wall-clock time: {value!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise MalformedTimeError(f"Wall-clock time out of range: {value!r}")

    return time(hour=hour, minute=minute)


def day_of_week(day: date) -> int:
    """Return the weekday of a calendar date with Sunday=0 ... Saturday=6."""
    return day.isoweekday() % 7


def day_name(day: date) -> str:
    return DAY_NAMES[day_of_week(day)]


def localize(day: date, wall_clock: time, tz: Timezone | str) -> DateTime:
    """
    Combine a calendar date and a wall-clock time into an instant in ``tz``.

    Times inside a DST gap are shifted forward and repeated times resolve to
    their later occurrence, which is how pendulum normalizes by default.
    """
    zone = ensure_timezone(tz) if isinstance(tz, str) else tz
    return pendulum.datetime(
        day.year,
        day.month,
        day.day,
        wall_clock.hour,
        wall_clock.minute,
        tz=zone,
    )


def to_date(value: date | str) -> date:
    """Coerce a ``date`` (or "YYYY-MM-DD") to a plain calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            parsed = pendulum.from_format(value.strip(), "YYYY-MM-DD")
        except ValueError as exc:
            raise MalformedTimeError(f"Cannot parse calendar date: {value!r}") from exc
        return parsed.date()
    raise MalformedTimeError(f"Expected a calendar date, got {value!r}")


def now(tz: Timezone | str = DEFAULT_TIMEZONE) -> DateTime:
    """Current instant in the given zone."""
    zone = ensure_timezone(tz) if isinstance(tz, str) else tz
    return pendulum.now(zone)
