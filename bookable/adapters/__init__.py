"""
Adapters layer - Raw storage rows and the file-backed schedule store.
"""

from .file_store import FileScheduleStore
from .records import (
    BookingRecord,
    DateOverrideRecord,
    EventTypeRecord,
    OutOfOfficeRecord,
    ProfessionalRecord,
    ScheduleRecord,
    StoreDocument,
    WeeklySlotRecord,
)

__all__ = [
    "BookingRecord",
    "DateOverrideRecord",
    "EventTypeRecord",
    "FileScheduleStore",
    "OutOfOfficeRecord",
    "ProfessionalRecord",
    "ScheduleRecord",
    "StoreDocument",
    "WeeklySlotRecord",
]
