"""
Core business logic for calculating bookable time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O, no logging).
Instrumentation is available through an injected ``SlotCalculatorObserver``.
"""

from datetime import date
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import pendulum
from pendulum.tz.timezone import Timezone

from .exceptions import InvalidDurationError, InvalidRangeError, ScheduleDataError
from .models import (
    ComputedSlot,
    DateOverride,
    ExistingBooking,
    OutOfOfficePeriod,
    TimeRange,
    WeeklyAvailabilitySlot,
)
from .timezone import day_of_week, ensure_timezone, localize, to_date

# Reasons reported to observers when a date produces no windows
SKIP_OUT_OF_OFFICE = "out_of_office"
SKIP_OVERRIDE_UNAVAILABLE = "override_unavailable"
SKIP_OVERRIDE_WITHOUT_SLOTS = "override_without_slots"
SKIP_NO_WEEKLY_SLOTS = "no_weekly_slots"


class SlotCalculatorObserver:
    """
    Hooks called while slots are calculated. All methods are no-ops.

    Subclass and override the hooks you need; the calculator never logs on
    its own.
    """

    def on_day_skipped(self, day: date, reason: str) -> None:
        pass

    def on_day_windows(self, day: date, windows: Sequence[TimeRange]) -> None:
        pass

    def on_slot_conflict(self, slot: TimeRange, booking: ExistingBooking) -> None:
        pass

    def on_slot_emitted(self, slot: ComputedSlot) -> None:
        pass


class CandidateSlots:
    """
    Fixed-length candidates inside one availability window.

    Iterating walks forward from the window start in steps of the duration and
    stops before a candidate would end after the window. Each iteration starts
    over, so the same object can be consumed more than once.
    """

    def __init__(self, window: TimeRange, duration_minutes: int):
        self.window = window
        self.duration_minutes = validate_duration(duration_minutes)

    def __iter__(self) -> Iterator[TimeRange]:
        current = self.window.start
        while True:
            # Absolute-time arithmetic, DST days keep their real length
            candidate_end = current.add(minutes=self.duration_minutes)
            if candidate_end > self.window.end:
                return
            yield TimeRange(start=current, end=candidate_end)
            current = candidate_end


def iter_candidate_slots(window: TimeRange, duration_minutes: int) -> CandidateSlots:
    return CandidateSlots(window, duration_minutes)


def is_out_of_office(day: date, ooo_periods: Iterable[OutOfOfficePeriod]) -> bool:
    """Check whether a calendar date falls within any out-of-office period."""
    return any(period.covers(day) for period in ooo_periods)


def find_date_override(day: date, date_overrides: Iterable[DateOverride]) -> Optional[DateOverride]:
    """Return the first override configured for ``day``, if any."""
    for override in date_overrides:
        if override.override_date == day:
            return override
    return None


def resolve_day_windows(
    day: date,
    weekly_slots: Sequence[WeeklyAvailabilitySlot],
    ooo_periods: Sequence[OutOfOfficePeriod],
    date_overrides: Sequence[DateOverride],
    timezone: str,
) -> List[TimeRange]:
    """
    Determine the availability windows of a single date.

    Precedence: out-of-office, then a date override, then the weekly pattern.
    """
    windows, _ = _resolve_windows(
        to_date(day), weekly_slots, ooo_periods, date_overrides, ensure_timezone(timezone)
    )
    return windows


class SlotCalculator:
    """
    Calculates bookable slots for one schedule.

    Algorithm, per calendar date in the requested range:
    1. Determine the date's windows (out-of-office > override > weekly)
    2. Walk each window in steps of the session duration
    3. Drop candidates overlapping a pending or confirmed booking
    4. Return all survivors ordered by start time
    """

    def __init__(self, timezone: str, observer: Optional[SlotCalculatorObserver] = None):
        self.timezone_name = timezone
        self.timezone = ensure_timezone(timezone)
        self.observer = observer or SlotCalculatorObserver()

    def calculate(
        self,
        start_date: date,
        end_date: date,
        weekly_slots: Sequence[WeeklyAvailabilitySlot],
        bookings: Sequence[ExistingBooking],
        duration_minutes: int,
        ooo_periods: Sequence[OutOfOfficePeriod] = (),
        date_overrides: Sequence[DateOverride] = (),
    ) -> List[ComputedSlot]:
        """
        Calculate bookable slots between two calendar dates (inclusive).

        Args:
            start_date: First date to scan
            end_date: Last date to scan
            weekly_slots: Recurring weekly availability
            bookings: Existing bookings; only pending and confirmed ones block time
            duration_minutes: Session length, also the step between candidates
            ooo_periods: Out-of-office periods
            date_overrides: Per-date replacements of the weekly pattern

        Returns:
            Slots ordered ascending by start

        Raises:
            InvalidRangeError: If start_date is after end_date
            InvalidDurationError: If duration_minutes is not a positive integer
            ScheduleDataError: If an input is not of the expected domain type
        """
        first_day = to_date(start_date)
        last_day = to_date(end_date)
        if first_day > last_day:
            raise InvalidRangeError(f"Start date {first_day} is after end date {last_day}")

        duration = validate_duration(duration_minutes)

        weekly_slots = _require_all(weekly_slots, WeeklyAvailabilitySlot, "weekly slot")
        bookings = _require_all(bookings, ExistingBooking, "booking")
        ooo_periods = _require_all(ooo_periods, OutOfOfficePeriod, "out-of-office period")
        date_overrides = _require_all(date_overrides, DateOverride, "date override")

        busy = self._blocking_ranges(bookings)
        slots: List[ComputedSlot] = []

        current = pendulum.date(first_day.year, first_day.month, first_day.day)
        while current <= last_day:
            windows, skip_reason = _resolve_windows(
                current, weekly_slots, ooo_periods, date_overrides, self.timezone
            )

            if skip_reason:
                self.observer.on_day_skipped(current, skip_reason)
            else:
                self.observer.on_day_windows(current, windows)

            for window in windows:
                for candidate in CandidateSlots(window, duration):
                    conflict = _find_conflict(candidate, busy)
                    if conflict is not None:
                        self.observer.on_slot_conflict(candidate, conflict)
                        continue

                    slot = ComputedSlot(start=candidate.start, end=candidate.end)
                    self.observer.on_slot_emitted(slot)
                    slots.append(slot)

            current = current.add(days=1)

        # Stable, so duplicates from overlapping windows keep their order
        slots.sort(key=lambda s: s.start)
        return slots

    def _blocking_ranges(
        self,
        bookings: Sequence[ExistingBooking],
    ) -> List[Tuple[TimeRange, ExistingBooking]]:
        """Pending and confirmed bookings, normalized to the schedule timezone."""
        busy = [
            (
                TimeRange(
                    start=booking.start.in_timezone(self.timezone),
                    end=booking.end.in_timezone(self.timezone),
                ),
                booking,
            )
            for booking in bookings
            if booking.status.blocks_time
        ]
        busy.sort(key=lambda item: item[0].start)
        return busy


def calculate_slots_for_date_range(
    start_date: date,
    end_date: date,
    weekly_slots: Sequence[WeeklyAvailabilitySlot],
    bookings: Sequence[ExistingBooking],
    duration_minutes: int,
    timezone: str,
    ooo_periods: Sequence[OutOfOfficePeriod] = (),
    date_overrides: Sequence[DateOverride] = (),
    observer: Optional[SlotCalculatorObserver] = None,
) -> List[ComputedSlot]:
    """Functional entry point, see ``SlotCalculator.calculate``."""
    calculator = SlotCalculator(timezone=timezone, observer=observer)
    return calculator.calculate(
        start_date=start_date,
        end_date=end_date,
        weekly_slots=weekly_slots,
        bookings=bookings,
        duration_minutes=duration_minutes,
        ooo_periods=ooo_periods,
        date_overrides=date_overrides,
    )


def _resolve_windows(
    day: date,
    weekly_slots: Sequence[WeeklyAvailabilitySlot],
    ooo_periods: Sequence[OutOfOfficePeriod],
    date_overrides: Sequence[DateOverride],
    tz: Timezone,
) -> Tuple[List[TimeRange], Optional[str]]:
    if is_out_of_office(day, ooo_periods):
        return [], SKIP_OUT_OF_OFFICE

    override = find_date_override(day, date_overrides)
    if override is not None:
        if override.is_unavailable:
            return [], SKIP_OVERRIDE_UNAVAILABLE
        if not override.slots:
            return [], SKIP_OVERRIDE_WITHOUT_SLOTS
        bounds = [(slot.start_time, slot.end_time) for slot in override.slots]
    else:
        weekday = day_of_week(day)
        bounds = [
            (slot.start_time, slot.end_time)
            for slot in weekly_slots
            if slot.enabled and slot.day_of_week == weekday
        ]
        if not bounds:
            return [], SKIP_NO_WEEKLY_SLOTS

    windows: List[TimeRange] = []
    for start_time, end_time in bounds:
        start = localize(day, start_time, tz)
        end = localize(day, end_time, tz)
        # A DST transition can collapse a short window
        if end > start:
            windows.append(TimeRange(start=start, end=end))

    return windows, None


def _find_conflict(
    candidate: TimeRange,
    busy: Sequence[Tuple[TimeRange, ExistingBooking]],
) -> Optional[ExistingBooking]:
    for busy_range, booking in busy:
        if busy_range.start >= candidate.end:
            break
        if candidate.overlaps(busy_range):
            return booking
    return None


def validate_duration(duration_minutes: int) -> int:
    """Return the duration if it is a positive integer number of minutes."""
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidDurationError(f"Duration must be an integer number of minutes, got {duration_minutes!r}")
    if duration_minutes <= 0:
        raise InvalidDurationError(f"Duration must be greater than zero, got {duration_minutes}")
    return duration_minutes


def _require_all(items, expected_type, label: str) -> list:
    values = list(items or ())
    for item in values:
        if not isinstance(item, expected_type):
            raise ScheduleDataError(
                f"Expected {expected_type.__name__} for {label}, got {type(item).__name__}"
            )
    return values
