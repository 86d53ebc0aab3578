"""
Mock calendar client for running without Azure authentication.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

from ..domain.exceptions import CalendarAPIError
from ..domain.models import BusyPeriod, TimeRange

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_calendar_data.json"


class MockGraphClient:
    """
    Client that serves busy periods from a JSON file.

    The file holds a list of events:
    [{"subject": "Standup", "start": "2024-03-18T09:30", "end": "2024-03-18T10:00"}]
    Naive timestamps are read in the requested timezone.
    """

    def __init__(self, data_file: Path | None = None):
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.calendar_events = self._load_calendar_data()

    def _load_calendar_data(self) -> List[Dict[str, Any]]:
        if not self.data_file.exists():
            raise CalendarAPIError(f"Mock calendar file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                events = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CalendarAPIError(f"Could not read mock calendar file {self.data_file}: {exc}") from exc

        if not isinstance(events, list):
            raise CalendarAPIError(f"Mock calendar file {self.data_file} must contain a list of events")

        return events

    def fetch_busy_periods(
        self,
        range_start: DateTime,
        range_end: DateTime,
        timezone: str = "Europe/Berlin"
    ) -> List[BusyPeriod]:
        """
        Return the mock events overlapping the requested window.
        """
        window = TimeRange(start=range_start, end=range_end)
        busy_periods: List[BusyPeriod] = []

        for event in self.calendar_events:
            try:
                period = BusyPeriod(
                    start=pendulum.parse(event["start"], tz=timezone).in_timezone(timezone),
                    end=pendulum.parse(event["end"], tz=timezone).in_timezone(timezone),
                    subject=event.get("subject") or "No Subject",
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise CalendarAPIError(f"Invalid mock event {event!r}: {exc}") from exc

            # Zero-length events on the window are kept, like the live API does
            if window.overlaps(period) or window.start <= period.start < window.end:
                busy_periods.append(period)

        logger.debug("Loaded %d mock events from %s", len(busy_periods), self.data_file)
        return busy_periods

    def test_connection(self) -> Dict[str, str]:
        """Mock connection test."""
        return {
            "displayName": "Mock User",
            "mail": "mock.user@example.com",
            "userPrincipalName": "mock.user@example.com"
        }
