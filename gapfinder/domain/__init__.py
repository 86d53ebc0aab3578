"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AuthenticationError,
    CalendarAPIError,
    ClipboardError,
    ConfigurationError,
    GapFinderError,
)
from .models import AvailabilityReport, BusyPeriod, FreeSlot, TimeRange, WorkingDay, WorkingHours
from .normalizer import IntervalNormalizer
from .slot_calculator import SlotCalculator

__all__ = [
    "AuthenticationError",
    "AvailabilityReport",
    "BusyPeriod",
    "CalendarAPIError",
    "ClipboardError",
    "ConfigurationError",
    "FreeSlot",
    "GapFinderError",
    "IntervalNormalizer",
    "SlotCalculator",
    "TimeRange",
    "WorkingDay",
    "WorkingHours",
]
