"""
bookable - bookable time slots from weekly schedules, overrides and bookings.
"""

__version__ = "0.1.0"
