"""
Domain models for busy periods, working days and free slots.
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Dict, Iterator, List, Tuple

import pendulum
from pendulum import Date, DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must not be after end. Zero-length ranges are allowed
    because calendars do contain zero-duration events.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_seconds(self) -> float:
        """Return the exact duration in seconds."""
        return (self.end - self.start).total_seconds()

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return int(self.duration_seconds() // 60)

    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BusyPeriod(TimeRange):
    """One calendar event occurrence."""
    subject: str = "No Subject"

    def with_bounds(self, start: DateTime, end: DateTime) -> "BusyPeriod":
        """Return a copy of this period restricted to new bounds."""
        return BusyPeriod(start=start, end=end, subject=self.subject)


@dataclass(frozen=True)
class FreeSlot(TimeRange):
    """
    A gap in the working window that is long enough to report.
    """

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: From h:mm AM to h:mm PM
        """
        return f"From {self.start.format('h:mm A', locale='en')} to {self.end.format('h:mm A', locale='en')}"


@dataclass(frozen=True)
class WorkingDay:
    """
    The working window of a single calendar date.

    No ordering invariant is enforced on purpose: a misconfigured window
    with day_start after day_end simply yields no free slots.
    """
    date: Date
    day_start: DateTime
    day_end: DateTime

    def contains_any(self, period: TimeRange) -> bool:
        """Check whether a period touches the working window."""
        return period.end > self.day_start and period.start < self.day_end


WEEKEND = (5, 6)  # Saturday, Sunday


@dataclass
class WorkingHours:
    """
    Configuration for working hours.
    """
    start_time: time
    end_time: time
    exclude_weekdays: List[int] = field(default_factory=list)  # extra days, 0=Monday
    timezone: str = "Europe/Berlin"

    def is_working_day(self, day: Date) -> bool:
        """Check if a given date falls on a working day. Weekends never do."""
        weekday = day.weekday()
        return weekday not in WEEKEND and weekday not in self.exclude_weekdays

    def get_working_day(self, day: Date) -> WorkingDay | None:
        """
        Get the working window for a specific date.
        Returns None if it's not a working day.
        """
        if not self.is_working_day(day):
            return None

        start = pendulum.datetime(
            day.year, day.month, day.day,
            self.start_time.hour, self.start_time.minute,
            tz=self.timezone
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            self.end_time.hour, self.end_time.minute,
            tz=self.timezone
        )

        return WorkingDay(date=day, day_start=start, day_end=end)

    def has_degenerate_window(self) -> bool:
        return self.start_time >= self.end_time


@dataclass(frozen=True)
class AvailabilityReport:
    """
    Free slots per working date, in chronological date order.
    """
    days: Dict[Date, Tuple[FreeSlot, ...]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Tuple[Date, Tuple[FreeSlot, ...]]]:
        return iter(self.days.items())

    def __len__(self) -> int:
        return len(self.days)

    def __contains__(self, day: object) -> bool:
        return day in self.days

    def dates(self) -> List[Date]:
        return list(self.days)

    def slots_for(self, day: Date) -> Tuple[FreeSlot, ...]:
        """Return the free slots of a date, empty if the date was not scanned."""
        return self.days.get(day, ())

    @property
    def total_slots(self) -> int:
        return sum(len(slots) for slots in self.days.values())

    @property
    def total_free_minutes(self) -> int:
        return sum(slot.duration_minutes() for slots in self.days.values() for slot in slots)
