"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityResult, AvailabilityService, LoggingObserver, ScheduleStoreProtocol

__all__ = ["AvailabilityResult", "AvailabilityService", "LoggingObserver", "ScheduleStoreProtocol"]
