"""
Domain-specific exception hierarchy for the availability calculator.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidRangeError(AvailabilityError):
    """Raised when a requested date range starts after it ends."""


class InvalidDurationError(AvailabilityError):
    """Raised when a session duration is not a positive number of minutes."""


class InvalidTimezoneError(AvailabilityError):
    """Raised when a timezone name is not a known IANA zone."""


class MalformedTimeError(AvailabilityError):
    """Raised when a wall-clock time cannot be parsed or a range is inverted."""


class ScheduleDataError(AvailabilityError):
    """Raised when raw schedule, override or booking data fails validation."""


class ProfessionalNotFoundError(AvailabilityError):
    """Raised when the store has no record for the requested professional."""


class EventTypeMismatchError(AvailabilityError):
    """Raised when an event type does not belong to the requested professional."""
