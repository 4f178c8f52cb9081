"""
Application service answering "which slots can be booked?" for a professional.

The service gathers schedule, override, out-of-office and booking rows from a
store, picks the schedule that applies, and delegates the calculation to the
domain-level ``SlotCalculator``. Depending on a small store protocol keeps the
CLI thin and lets tests plug in an in-memory store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import pendulum

from ..adapters.records import EventTypeRecord, ProfessionalRecord, ScheduleRecord
from ..domain.exceptions import EventTypeMismatchError, InvalidRangeError
from ..domain.models import (
    ComputedSlot,
    DateOverride,
    ExistingBooking,
    OutOfOfficePeriod,
    TimeRange,
)
from ..domain.slot_calculator import (
    SlotCalculatorObserver,
    calculate_slots_for_date_range,
    validate_duration,
)
from ..domain.timezone import DEFAULT_TIMEZONE, ensure_timezone, to_date, validate_timezone

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 30


class ScheduleStoreProtocol(Protocol):
    """Protocol describing the store behaviour needed by the service."""

    def get_professional(self, professional_id: str) -> ProfessionalRecord:
        """Return the professional or raise ``ProfessionalNotFoundError``."""

    def list_schedules(self, professional_id: str) -> List[ScheduleRecord]:
        """Return every schedule of the professional, active or not."""

    def get_event_type(self, event_type_id: str) -> Optional[EventTypeRecord]:
        """Return the event type, or None if it doesn't exist."""

    def get_overrides(self, professional_id: str, start: date, end: date) -> List[DateOverride]:
        """Return overrides dated within the range."""

    def get_out_of_office(self, professional_id: str, start: date, end: date) -> List[OutOfOfficePeriod]:
        """Return out-of-office periods overlapping the range."""

    def get_bookings(self, professional_id: str, start: date, end: date) -> List[ExistingBooking]:
        """Return bookings around the range."""


@dataclass
class AvailabilityResult:
    """Slots plus the context the presentation layer reports alongside them."""
    professional_id: str
    timezone: str
    slots: List[ComputedSlot] = field(default_factory=list)
    schedule_id: Optional[str] = None
    duration_minutes: Optional[int] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "professional_id": self.professional_id,
            "timezone": self.timezone,
            "schedule_id": self.schedule_id,
            "duration_minutes": self.duration_minutes,
            "message": self.message,
            "slots": [slot.to_dict() for slot in self.slots],
        }


class LoggingObserver(SlotCalculatorObserver):
    """Reports calculator progress at debug level."""

    def __init__(self, professional_id: str):
        self.professional_id = professional_id

    def on_day_skipped(self, day: date, reason: str) -> None:
        logger.debug("%s: %s has no windows (%s)", self.professional_id, day, reason)

    def on_day_windows(self, day: date, windows: Sequence[TimeRange]) -> None:
        logger.debug(
            "%s: %s has %d window(s): %s",
            self.professional_id,
            day,
            len(windows),
            ", ".join(str(w) for w in windows),
        )

    def on_slot_conflict(self, slot: TimeRange, booking: ExistingBooking) -> None:
        logger.debug(
            "%s: slot %s conflicts with %s booking %s - %s",
            self.professional_id,
            slot,
            booking.status.value,
            booking.start.to_iso8601_string(),
            booking.end.to_iso8601_string(),
        )


class AvailabilityService:
    """
    Orchestrates store lookups, schedule selection and slot calculation.
    """

    def __init__(
        self,
        store: ScheduleStoreProtocol,
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        ensure_timezone(default_timezone)
        self._store = store
        self._default_timezone = default_timezone

    def find_slots(
        self,
        *,
        professional_id: str,
        start_date: date,
        end_date: date,
        duration_minutes: Optional[int] = None,
        event_type_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AvailabilityResult:
        """
        Compute bookable slots for a professional over an inclusive date range.

        Args:
            professional_id: Dietitian or therapist to query
            start_date: First date of the range
            end_date: Last date of the range
            duration_minutes: Session length; defaults to the event type's
                duration, or 30 minutes without an event type
            event_type_id: Offering whose linked schedule should be used
            now: When given, slots starting before this instant are dropped

        Raises:
            InvalidRangeError: If start_date is after end_date
            InvalidDurationError: If the duration is not positive
            ProfessionalNotFoundError: If the professional is unknown
            EventTypeMismatchError: If the event type belongs to someone else
        """
        first_day = to_date(start_date)
        last_day = to_date(end_date)
        if first_day > last_day:
            raise InvalidRangeError(f"Start date {first_day} is after end date {last_day}")

        self._store.get_professional(professional_id)
        event_type = self._resolve_event_type(professional_id, event_type_id)

        if duration_minutes is None:
            duration_minutes = event_type.duration_minutes if event_type else DEFAULT_DURATION_MINUTES
        duration = validate_duration(duration_minutes)

        schedule, message = self.select_schedule(professional_id, event_type)
        if schedule is None:
            logger.info("%s: %s", professional_id, message)
            return AvailabilityResult(
                professional_id=professional_id,
                timezone=self._default_timezone,
                duration_minutes=duration,
                message=message,
            )

        timezone = self.resolve_timezone(schedule)

        slots = calculate_slots_for_date_range(
            start_date=first_day,
            end_date=last_day,
            weekly_slots=schedule.weekly_slots(),
            bookings=self._store.get_bookings(professional_id, first_day, last_day),
            duration_minutes=duration,
            timezone=timezone,
            ooo_periods=self._store.get_out_of_office(professional_id, first_day, last_day),
            date_overrides=self._store.get_overrides(professional_id, first_day, last_day),
            observer=LoggingObserver(professional_id),
        )

        if now is not None:
            cutoff = pendulum.instance(now)
            slots = [slot for slot in slots if slot.start >= cutoff]

        logger.info(
            "%s: %d slot(s) between %s and %s using schedule %s (%s)",
            professional_id,
            len(slots),
            first_day,
            last_day,
            schedule.id,
            timezone,
        )

        return AvailabilityResult(
            professional_id=professional_id,
            timezone=timezone,
            slots=slots,
            schedule_id=schedule.id,
            duration_minutes=duration,
            message=None if slots else "No available slots in the requested range",
        )

    def select_schedule(
        self,
        professional_id: str,
        event_type: Optional[EventTypeRecord] = None,
    ) -> Tuple[Optional[ScheduleRecord], Optional[str]]:
        """
        Pick the schedule that governs availability.

        A schedule linked to the event type wins; otherwise, or when the
        linked one is missing or inactive, the active default schedule is
        used. Returns the schedule, or None with a reason.
        """
        schedules = self._store.list_schedules(professional_id)
        if schedules and all(not schedule.active for schedule in schedules):
            return None, "All schedules are inactive"

        active = [schedule for schedule in schedules if schedule.active]

        linked_id = event_type.availability_schedule_id if event_type else None
        if linked_id:
            for schedule in active:
                if schedule.id == linked_id:
                    return schedule, None
            logger.warning(
                "Schedule %s linked to event type %s not found, falling back to default",
                linked_id,
                event_type.id,
            )

        for schedule in active:
            if schedule.is_default:
                return schedule, None

        if linked_id:
            return None, f"Linked schedule {linked_id} not found and no default schedule is set"
        return None, "No default schedule found"

    def resolve_timezone(self, schedule: ScheduleRecord) -> str:
        """The schedule's zone, or the default one if it is missing or invalid."""
        timezone = schedule.timezone or self._default_timezone
        if not validate_timezone(timezone):
            logger.warning(
                "Invalid timezone %r on schedule %s, falling back to %s",
                timezone,
                schedule.id,
                self._default_timezone,
            )
            return self._default_timezone
        return timezone

    def _resolve_event_type(
        self,
        professional_id: str,
        event_type_id: Optional[str],
    ) -> Optional[EventTypeRecord]:
        if not event_type_id:
            return None

        event_type = self._store.get_event_type(event_type_id)
        if event_type is None:
            logger.warning("Event type %s not found, using the default schedule", event_type_id)
            return None

        if event_type.user_id != professional_id:
            raise EventTypeMismatchError(
                f"Event type {event_type_id} does not belong to professional {professional_id}"
            )
        return event_type
