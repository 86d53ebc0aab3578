"""
Partitioning of raw busy periods into per-day, start-sorted buckets.
"""

import logging
from typing import Dict, Iterable, List

from pendulum import Date

from .models import BusyPeriod

logger = logging.getLogger(__name__)


class IntervalNormalizer:
    """
    Buckets busy periods by the calendar date they fall on.

    All timestamps are expected in the same local timezone as the requested
    date range; no conversion happens here. Periods that cross midnight are
    split into one segment per date so the tail of a late event still blocks
    the next morning. Overlapping, duplicate and zero-length periods are
    passed through unchanged.
    """

    def __init__(self, split_across_midnight: bool = True):
        self.split_across_midnight = split_across_midnight

    def bucket_by_day(
        self,
        busy_periods: Iterable[BusyPeriod],
        start_date: Date,
        end_date: Date
    ) -> Dict[Date, List[BusyPeriod]]:
        """
        Partition busy periods into start-sorted lists keyed by date.

        Every date in [start_date, end_date] gets an entry, possibly empty.
        Segments falling outside the range are dropped.
        """
        buckets: Dict[Date, List[BusyPeriod]] = {}

        current = start_date
        while current <= end_date:
            buckets[current] = []
            current = current.add(days=1)

        for period in busy_periods:
            for segment in self._segments(period):
                day = segment.start.date()
                if day in buckets:
                    buckets[day].append(segment)

        for day, periods in buckets.items():
            periods.sort(key=lambda p: (p.start, p.end))
            if periods:
                logger.debug("%s: %d busy period(s)", day, len(periods))

        return buckets

    def _segments(self, period: BusyPeriod) -> List[BusyPeriod]:
        """Split a period at each midnight it crosses."""
        if not self.split_across_midnight or period.start.date() == period.end.date():
            return [period]

        segments: List[BusyPeriod] = []
        segment_start = period.start

        while segment_start < period.end:
            next_midnight = segment_start.add(days=1).start_of("day")
            segment_end = min(next_midnight, period.end)
            segments.append(period.with_bounds(segment_start, segment_end))
            segment_start = segment_end

        return segments
