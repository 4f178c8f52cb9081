"""
Raw storage rows and their conversion to domain value objects.

Rows arrive loosely typed (snake_case mappings from a database export or a
data file). They are validated once here, before the calculator ever sees
them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Type, TypeVar, Union

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..domain.exceptions import MalformedTimeError, ScheduleDataError
from ..domain.models import (
    BookingStatus,
    DateOverride,
    ExistingBooking,
    OutOfOfficePeriod,
    OverrideSlot,
    WeeklyAvailabilitySlot,
)
from ..domain.timezone import parse_wall_clock

RecordT = TypeVar("RecordT", bound=BaseModel)


def _check_wall_clock_pair(start_time: str, end_time: str) -> None:
    """Raise ValueError unless both times parse and the end is after the start."""
    try:
        start = parse_wall_clock(start_time)
        end = parse_wall_clock(end_time)
    except MalformedTimeError as exc:
        raise ValueError(str(exc)) from exc
    if end <= start:
        raise ValueError(f"end_time {end_time} is not after start_time {start_time}")


def parse_record(model: Type[RecordT], data: Any) -> RecordT:
    """
    Validate a raw row against a record model.

    Raises:
        ScheduleDataError: If the row does not match the expected shape
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ScheduleDataError(f"Invalid {model.__name__}: {exc}") from exc


def parse_instant(value: Union[datetime, str]) -> DateTime:
    """Parse a stored timestamp; values without an offset are taken as UTC."""
    if isinstance(value, datetime):
        return pendulum.instance(value)
    try:
        parsed = pendulum.parse(value, tz="UTC")
    except ValueError as exc:
        raise MalformedTimeError(f"Cannot parse timestamp: {value!r}") from exc
    if not isinstance(parsed, DateTime):
        raise MalformedTimeError(f"Expected a date and time, got {value!r}")
    return parsed


class WeeklySlotRecord(BaseModel):
    """Row of ``availability_schedule_slots``."""
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    enabled: bool = True

    @model_validator(mode="after")
    def validate_times(self) -> "WeeklySlotRecord":
        _check_wall_clock_pair(self.start_time, self.end_time)
        return self

    def to_domain(self) -> WeeklyAvailabilitySlot:
        return WeeklyAvailabilitySlot(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            enabled=self.enabled,
        )


class OverrideSlotRecord(BaseModel):
    start_time: str
    end_time: str

    @model_validator(mode="after")
    def validate_times(self) -> "OverrideSlotRecord":
        _check_wall_clock_pair(self.start_time, self.end_time)
        return self

    def to_domain(self) -> OverrideSlot:
        return OverrideSlot(start_time=self.start_time, end_time=self.end_time)


class DateOverrideRecord(BaseModel):
    """Row of ``availability_date_overrides`` with its nested slots."""
    override_date: date
    is_unavailable: bool = False
    slots: List[OverrideSlotRecord] = Field(default_factory=list)

    def to_domain(self) -> DateOverride:
        # Slots of an unavailable date are never consulted
        slots = () if self.is_unavailable else tuple(s.to_domain() for s in self.slots)
        return DateOverride(
            override_date=self.override_date,
            is_unavailable=self.is_unavailable,
            slots=slots,
        )


class OutOfOfficeRecord(BaseModel):
    start_date: date
    end_date: date

    def to_domain(self) -> OutOfOfficePeriod:
        return OutOfOfficePeriod(start_date=self.start_date, end_date=self.end_date)

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


class BookingRecord(BaseModel):
    start_time: Union[datetime, str]
    end_time: Union[datetime, str]
    status: BookingStatus = BookingStatus.PENDING

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        """Statuses are stored upper-case; accept any casing."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def to_domain(self) -> ExistingBooking:
        return ExistingBooking(
            start=parse_instant(self.start_time),
            end=parse_instant(self.end_time),
            status=self.status,
        )


class ScheduleRecord(BaseModel):
    """Row of ``availability_schedules`` with its weekly slots."""
    id: str
    name: str = ""
    timezone: Optional[str] = None
    active: bool = True
    is_default: bool = False
    slots: List[WeeklySlotRecord] = Field(default_factory=list)

    def weekly_slots(self, enabled_only: bool = True) -> List[WeeklyAvailabilitySlot]:
        return [
            slot.to_domain()
            for slot in self.slots
            if slot.enabled or not enabled_only
        ]


class EventTypeRecord(BaseModel):
    """An offering a client can book; may link a specific schedule."""
    id: str
    user_id: str
    title: str = ""
    duration_minutes: int = Field(default=30, gt=0)
    availability_schedule_id: Optional[str] = None


class ProfessionalRecord(BaseModel):
    """A dietitian or therapist together with all of their calendar rows."""
    id: str
    name: str = ""
    role: str = "DIETITIAN"
    schedules: List[ScheduleRecord] = Field(default_factory=list)
    overrides: List[DateOverrideRecord] = Field(default_factory=list)
    out_of_office: List[OutOfOfficeRecord] = Field(default_factory=list)
    bookings: List[BookingRecord] = Field(default_factory=list)

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: str) -> str:
        role = value.strip().upper()
        if role not in ("DIETITIAN", "THERAPIST"):
            raise ValueError(f"role must be DIETITIAN or THERAPIST, got {value!r}")
        return role

    @field_validator("schedules")
    @classmethod
    def validate_schedule_ids(cls, value: List[ScheduleRecord]) -> List[ScheduleRecord]:
        """Ensure schedule ids are unique per professional."""
        seen: set[str] = set()
        for schedule in value:
            if schedule.id in seen:
                raise ValueError(f"Duplicate schedule id detected: {schedule.id}")
            seen.add(schedule.id)
        return value


class StoreDocument(BaseModel):
    """Root of a schedule data file."""
    professionals: List[ProfessionalRecord] = Field(default_factory=list)
    event_types: List[EventTypeRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_ids(self) -> "StoreDocument":
        """Ensure professional and event type ids are unique."""
        for label, ids in (
            ("professional", [p.id for p in self.professionals]),
            ("event type", [e.id for e in self.event_types]),
        ):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {label} id(s): {', '.join(duplicates)}")
        return self
