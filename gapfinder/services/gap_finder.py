"""
Application service for finding free slots in a single calendar.

The service performs one bulk fetch of busy periods via a calendar client
adapter, partitions them by day and delegates the scan to the domain-level
``SlotCalculator``. This keeps the CLI thin and allows the calendar
dependency to be replaced by a stub in tests.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..config import SearchParameters
from ..domain.models import AvailabilityReport, BusyPeriod
from ..domain.normalizer import IntervalNormalizer
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    def fetch_busy_periods(
        self,
        range_start: DateTime,
        range_end: DateTime,
        timezone: str,
    ) -> List[BusyPeriod]:
        """Return every busy period in the window, localized to ``timezone``."""


class GapFinderService:
    """
    Orchestrates busy-period retrieval and free-slot calculation.

    Collaborator errors propagate unchanged: either the fetch succeeds and a
    full report is produced, or no report is produced at all.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        timezone: str = "Europe/Berlin",
        exclude_days: Sequence[int] = (),
        normalizer: IntervalNormalizer | None = None,
    ) -> None:
        self._calendar_client = calendar_client
        self._timezone = timezone
        self._exclude_days = list(exclude_days)
        self._normalizer = normalizer or IntervalNormalizer()

    def find_availability(self, params: SearchParameters) -> AvailabilityReport:
        """
        Fetch busy data for the whole range and compute the report.
        """
        busy_periods = self.fetch_busy_periods(params)
        return self.calculate_report(params, busy_periods)

    def fetch_busy_periods(self, params: SearchParameters) -> List[BusyPeriod]:
        """Fetch all busy periods between the start and end dates, inclusive."""
        range_start = pendulum.datetime(
            params.start_date.year, params.start_date.month, params.start_date.day,
            tz=self._timezone
        )
        range_end = pendulum.datetime(
            params.end_date.year, params.end_date.month, params.end_date.day,
            tz=self._timezone
        ).add(days=1)

        busy_periods = self._calendar_client.fetch_busy_periods(
            range_start=range_start,
            range_end=range_end,
            timezone=self._timezone,
        )
        logger.debug("Received %d busy period(s)", len(busy_periods))
        return busy_periods

    def calculate_report(
        self,
        params: SearchParameters,
        busy_periods: Sequence[BusyPeriod],
    ) -> AvailabilityReport:
        """Partition busy periods by day and scan every working day."""
        busy_by_day = self._normalizer.bucket_by_day(
            busy_periods,
            start_date=params.start_date,
            end_date=params.end_date,
        )

        calculator = SlotCalculator(
            working_hours=params.working_hours(self._exclude_days, self._timezone),
            min_duration_minutes=params.minimum_slot_minutes,
        )

        return calculator.build_report(
            start_date=params.start_date,
            end_date=params.end_date,
            busy_by_day=busy_by_day,
        )
