"""
Schedule store backed by a JSON or YAML data file.

The file mirrors the tables the booking system keeps (schedules with their
weekly slots, date overrides, out-of-office periods, bookings and event
types), grouped per professional. It is loaded and validated once.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
import yaml

from ..domain.exceptions import ProfessionalNotFoundError, ScheduleDataError
from ..domain.models import DateOverride, ExistingBooking, OutOfOfficePeriod
from .records import (
    EventTypeRecord,
    ProfessionalRecord,
    ScheduleRecord,
    StoreDocument,
    parse_record,
)

logger = logging.getLogger(__name__)


class FileScheduleStore:
    """
    Read-only store serving one professional's calendar rows at a time.

    Query methods take inclusive calendar-date ranges, the same way the
    availability endpoint queried the database.
    """

    def __init__(self, document: StoreDocument, source: Optional[Path] = None):
        self.document = document
        self.source = source
        self._professionals: Dict[str, ProfessionalRecord] = {
            professional.id: professional for professional in document.professionals
        }
        self._event_types: Dict[str, EventTypeRecord] = {
            event_type.id: event_type for event_type in document.event_types
        }

    @classmethod
    def from_file(cls, path: Path) -> "FileScheduleStore":
        """
        Load a store from a ``.json``, ``.yaml`` or ``.yml`` file.

        Raises:
            FileNotFoundError: If the data file doesn't exist
            ScheduleDataError: If the file cannot be parsed or fails validation
        """
        if not path.exists():
            raise FileNotFoundError(f"Schedule data file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ScheduleDataError(f"Cannot parse schedule data in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleDataError("Schedule data file must contain a mapping at the root level.")

        document = parse_record(StoreDocument, data)
        logger.info(
            "Loaded %d professional(s) and %d event type(s) from %s",
            len(document.professionals),
            len(document.event_types),
            path,
        )
        return cls(document, source=path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileScheduleStore":
        return cls(parse_record(StoreDocument, data))

    def get_professional(self, professional_id: str) -> ProfessionalRecord:
        professional = self._professionals.get(professional_id)
        if professional is None:
            raise ProfessionalNotFoundError(f"Professional not found: {professional_id}")
        return professional

    def list_professionals(self) -> List[ProfessionalRecord]:
        return list(self._professionals.values())

    def list_schedules(self, professional_id: str) -> List[ScheduleRecord]:
        return list(self.get_professional(professional_id).schedules)

    def get_event_type(self, event_type_id: str) -> Optional[EventTypeRecord]:
        return self._event_types.get(event_type_id)

    def get_overrides(self, professional_id: str, start: date, end: date) -> List[DateOverride]:
        professional = self.get_professional(professional_id)
        return [
            record.to_domain()
            for record in professional.overrides
            if start <= record.override_date <= end
        ]

    def get_out_of_office(self, professional_id: str, start: date, end: date) -> List[OutOfOfficePeriod]:
        """Out-of-office periods overlapping the range."""
        professional = self.get_professional(professional_id)
        return [
            record.to_domain()
            for record in professional.out_of_office
            if record.overlaps(start, end)
        ]

    def get_bookings(self, professional_id: str, start: date, end: date) -> List[ExistingBooking]:
        """
        Pending and confirmed bookings around the range.

        The range is widened by a day on each side so that no zone offset
        can drop a booking that touches the first or last date.
        """
        professional = self.get_professional(professional_id)
        lower = pendulum.datetime(start.year, start.month, start.day).subtract(days=1)
        upper = pendulum.datetime(end.year, end.month, end.day).add(days=2)

        bookings: List[ExistingBooking] = []
        for record in professional.bookings:
            booking = record.to_domain()
            if not booking.status.blocks_time:
                continue
            if booking.start < upper and booking.end > lower:
                bookings.append(booking)
        return bookings
