"""
Shared fixtures and helpers for the test suite.
"""

from datetime import time

import pendulum
import pytest

from gapfinder.domain.models import BusyPeriod, WorkingHours

TZ = "Europe/Berlin"


def at(value: str):
    """Parse a local timestamp in the test timezone."""
    return pendulum.parse(value, tz=TZ)


def busy(start: str, end: str, subject: str = "Meeting") -> BusyPeriod:
    return BusyPeriod(start=at(start), end=at(end), subject=subject)


@pytest.fixture
def office_hours() -> WorkingHours:
    return WorkingHours(
        start_time=time(8, 0),
        end_time=time(17, 0),
        exclude_weekdays=[],
        timezone=TZ
    )
