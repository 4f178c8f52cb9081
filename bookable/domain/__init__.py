"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AvailabilityError,
    EventTypeMismatchError,
    InvalidDurationError,
    InvalidRangeError,
    InvalidTimezoneError,
    MalformedTimeError,
    ProfessionalNotFoundError,
    ScheduleDataError,
)
from .models import (
    BookingStatus,
    ComputedSlot,
    DateOverride,
    ExistingBooking,
    OutOfOfficePeriod,
    OverrideSlot,
    TimeRange,
    WeeklyAvailabilitySlot,
)
from .slot_calculator import SlotCalculator, SlotCalculatorObserver, calculate_slots_for_date_range

__all__ = [
    "AvailabilityError",
    "BookingStatus",
    "ComputedSlot",
    "DateOverride",
    "EventTypeMismatchError",
    "ExistingBooking",
    "InvalidDurationError",
    "InvalidRangeError",
    "InvalidTimezoneError",
    "MalformedTimeError",
    "OutOfOfficePeriod",
    "OverrideSlot",
    "ProfessionalNotFoundError",
    "ScheduleDataError",
    "SlotCalculator",
    "SlotCalculatorObserver",
    "TimeRange",
    "WeeklyAvailabilitySlot",
    "calculate_slots_for_date_range",
]
