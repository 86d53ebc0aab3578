"""
Core business logic for calculating free time slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from typing import Dict, List, Sequence

from pendulum import Date

from .models import AvailabilityReport, BusyPeriod, FreeSlot, WorkingDay, WorkingHours

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates free slots from per-day busy periods and working hours.

    Algorithm:
    1. Iterate over the dates of the requested range, skipping excluded weekdays
    2. Build the working window for each remaining date
    3. Walk the day's start-sorted busy periods with a forward-only cursor
    4. Emit every gap between the cursor and the next busy period
       that meets the minimum duration
    5. Emit the trailing gap up to the end of the working window
    """

    def __init__(self, working_hours: WorkingHours, min_duration_minutes: int = 30):
        self.working_hours = working_hours
        self.min_duration_minutes = min_duration_minutes

    def build_report(
        self,
        start_date: Date,
        end_date: Date,
        busy_by_day: Dict[Date, List[BusyPeriod]]
    ) -> AvailabilityReport:
        """
        Scan every working day in the date range.

        Args:
            start_date: First date of the search period
            end_date: Last date of the search period (inclusive)
            busy_by_day: Start-sorted busy periods keyed by date

        Returns:
            AvailabilityReport with one entry per working date
        """
        if self.working_hours.has_degenerate_window():
            logger.warning(
                "Working window %s-%s is empty; every day will report zero slots",
                self.working_hours.start_time.strftime("%H:%M"),
                self.working_hours.end_time.strftime("%H:%M"),
            )

        days = {}
        current = start_date

        while current <= end_date:
            working_day = self.working_hours.get_working_day(current)

            if working_day is not None:
                slots = self.scan_day(working_day, busy_by_day.get(current, []))
                days[current] = tuple(slots)
            else:
                logger.debug("Skipping excluded day %s", current)

            current = current.add(days=1)

        return AvailabilityReport(days=days)

    def scan_day(
        self,
        working_day: WorkingDay,
        busy_periods: Sequence[BusyPeriod]
    ) -> List[FreeSlot]:
        """
        Subtract busy periods from a working window, yielding free slots.

        Example:
        Working: 08:00 - 17:00
        Busy: [09:00-10:00, 09:30-11:00]
        Result: [08:00-09:00, 11:00-17:00]
        """
        free_slots: List[FreeSlot] = []
        free_start = working_day.day_start

        for busy in self._within_window(working_day, busy_periods):
            # Already covered by an earlier, overlapping period
            if busy.end <= free_start:
                continue

            if busy.start > free_start:
                self._emit_gap(free_slots, free_start, busy.start)

            free_start = busy.end

        if free_start < working_day.day_end:
            self._emit_gap(free_slots, free_start, working_day.day_end)

        return free_slots

    def _within_window(
        self,
        working_day: WorkingDay,
        busy_periods: Sequence[BusyPeriod]
    ) -> List[BusyPeriod]:
        """
        Keep the periods that occupy time inside the working window.

        Zero-length periods never block anything, so they cannot split a gap.
        """
        return [
            busy for busy in busy_periods
            if not busy.is_empty() and working_day.contains_any(busy)
        ]

    def _emit_gap(self, free_slots: List[FreeSlot], start, end) -> None:
        gap = FreeSlot(start=start, end=end)
        if gap.duration_seconds() >= self.min_duration_minutes * 60:
            free_slots.append(gap)
