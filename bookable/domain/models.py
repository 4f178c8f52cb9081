"""
Domain models for schedules, bookings and computed slots.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import MalformedTimeError, ScheduleDataError
from .timezone import day_name, parse_wall_clock, to_date


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (touching ends do not overlap)."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if ``other`` lies entirely within this range."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


def _wall_clock_pair(owner: object, start_value, end_value) -> Tuple[time, time]:
    start = parse_wall_clock(start_value)
    end = parse_wall_clock(end_value)
    if end <= start:
        raise MalformedTimeError(
            f"{type(owner).__name__} ends at {end:%H:%M}, which is not after its start {start:%H:%M}"
        )
    return start, end


@dataclass(frozen=True)
class WeeklyAvailabilitySlot:
    """
    One recurring availability window on one weekday.

    ``day_of_week`` uses Sunday=0 ... Saturday=6. Times are wall-clock values
    in the schedule's timezone.
    """
    day_of_week: int
    start_time: time
    end_time: time
    enabled: bool = True

    def __post_init__(self):
        if isinstance(self.day_of_week, bool) or not isinstance(self.day_of_week, int):
            raise ScheduleDataError(f"day_of_week must be an integer, got {self.day_of_week!r}")
        if not 0 <= self.day_of_week <= 6:
            raise ScheduleDataError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")

        start, end = _wall_clock_pair(self, self.start_time, self.end_time)
        object.__setattr__(self, "start_time", start)
        object.__setattr__(self, "end_time", end)


@dataclass(frozen=True)
class OverrideSlot:
    """A single window configured on a date override."""
    start_time: time
    end_time: time

    def __post_init__(self):
        start, end = _wall_clock_pair(self, self.start_time, self.end_time)
        object.__setattr__(self, "start_time", start)
        object.__setattr__(self, "end_time", end)


@dataclass(frozen=True)
class DateOverride:
    """
    Exception that fully replaces the weekly pattern on a single date.

    An override that is not unavailable but has no slots means "available,
    nothing configured" and yields no windows; it never falls back to the
    weekly pattern.
    """
    override_date: date
    is_unavailable: bool = False
    slots: Tuple[OverrideSlot, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "override_date", to_date(self.override_date))
        slots = tuple(self.slots or ())
        for slot in slots:
            if not isinstance(slot, OverrideSlot):
                raise ScheduleDataError(
                    f"Expected OverrideSlot in date override {self.override_date}, got {type(slot).__name__}"
                )
        object.__setattr__(self, "slots", slots)


@dataclass(frozen=True)
class OutOfOfficePeriod:
    """Inclusive calendar-date range during which nothing is bookable."""
    start_date: date
    end_date: date

    def __post_init__(self):
        start = to_date(self.start_date)
        end = to_date(self.end_date)
        if start > end:
            raise MalformedTimeError(f"Out-of-office period starts {start} after it ends {end}")
        object.__setattr__(self, "start_date", start)
        object.__setattr__(self, "end_date", end)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @property
    def blocks_time(self) -> bool:
        """Only pending and confirmed bookings occupy the calendar."""
        return self in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass(frozen=True)
class ExistingBooking:
    """
    A booking already on the professional's calendar.

    Naive instants are interpreted as UTC.
    """
    start: DateTime
    end: DateTime
    status: BookingStatus = BookingStatus.CONFIRMED

    def __post_init__(self):
        for label, value in (("start", self.start), ("end", self.end)):
            if not isinstance(value, datetime):
                raise ScheduleDataError(f"Booking {label} must be a datetime, got {type(value).__name__}")

        start = pendulum.instance(self.start)
        end = pendulum.instance(self.end)
        if end <= start:
            raise MalformedTimeError(f"Booking ends at {end} which is not after its start {start}")

        try:
            status = BookingStatus(str(getattr(self.status, "value", self.status)).upper())
        except ValueError as exc:
            raise ScheduleDataError(f"Unknown booking status: {self.status!r}") from exc

        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "status", status)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


@dataclass(frozen=True)
class ComputedSlot:
    """
    A bookable window produced by the calculator.
    """
    start: DateTime
    end: DateTime

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    def duration_minutes(self) -> int:
        return self.time_range.duration_minutes()

    def to_dict(self) -> Dict[str, str]:
        """Serialize as ISO 8601 instants in the schedule's timezone."""
        return {
            "start": self.start.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
        }

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, DD.MM.YYYY | HH:MM - HH:MM
        """
        weekday = day_name(self.start.date())
        date_str = self.start.format("DD.MM.YYYY")
        time_str = f"{self.start.format('HH:mm')} - {self.end.format('HH:mm')}"

        return f"{weekday}, {date_str} | {time_str} ({self.duration_minutes()} min)"
