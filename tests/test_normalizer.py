"""
Tests for the interval normalizer.
"""

import pendulum

from gapfinder.domain.normalizer import IntervalNormalizer

from conftest import at, busy

MONDAY = pendulum.date(2024, 3, 18)
TUESDAY = pendulum.date(2024, 3, 19)
WEDNESDAY = pendulum.date(2024, 3, 20)


class TestIntervalNormalizer:
    """Tests for IntervalNormalizer."""

    def test_every_date_gets_a_bucket(self):
        buckets = IntervalNormalizer().bucket_by_day([], MONDAY, WEDNESDAY)

        assert list(buckets) == [MONDAY, TUESDAY, WEDNESDAY]
        assert all(periods == [] for periods in buckets.values())

    def test_periods_are_sorted_by_start(self):
        periods = [
            busy("2024-03-18 14:00", "2024-03-18 15:00", "C"),
            busy("2024-03-19 09:00", "2024-03-19 10:00", "D"),
            busy("2024-03-18 09:00", "2024-03-18 10:00", "A"),
            busy("2024-03-18 09:30", "2024-03-18 11:00", "B"),
        ]

        buckets = IntervalNormalizer().bucket_by_day(periods, MONDAY, TUESDAY)

        assert [p.subject for p in buckets[MONDAY]] == ["A", "B", "C"]
        assert [p.subject for p in buckets[TUESDAY]] == ["D"]

    def test_overlaps_duplicates_and_zero_length_pass_through(self):
        periods = [
            busy("2024-03-18 09:00", "2024-03-18 10:00", "A"),
            busy("2024-03-18 09:00", "2024-03-18 10:00", "A"),
            busy("2024-03-18 14:00", "2024-03-18 14:00", "Z"),
        ]

        buckets = IntervalNormalizer().bucket_by_day(periods, MONDAY, MONDAY)

        assert buckets[MONDAY] == sorted(periods, key=lambda p: p.start)

    def test_periods_outside_range_are_dropped(self):
        periods = [
            busy("2024-03-17 09:00", "2024-03-17 10:00"),
            busy("2024-03-21 09:00", "2024-03-21 10:00"),
        ]

        buckets = IntervalNormalizer().bucket_by_day(periods, MONDAY, WEDNESDAY)

        assert sum(len(p) for p in buckets.values()) == 0

    def test_cross_midnight_period_is_split(self):
        periods = [busy("2024-03-18 22:00", "2024-03-20 09:00", "Offsite")]

        buckets = IntervalNormalizer().bucket_by_day(periods, MONDAY, WEDNESDAY)

        assert [(p.start, p.end) for p in buckets[MONDAY]] == [
            (at("2024-03-18 22:00"), at("2024-03-19 00:00"))
        ]
        assert [(p.start, p.end) for p in buckets[TUESDAY]] == [
            (at("2024-03-19 00:00"), at("2024-03-20 00:00"))
        ]
        assert [(p.start, p.end) for p in buckets[WEDNESDAY]] == [
            (at("2024-03-20 00:00"), at("2024-03-20 09:00"))
        ]
        assert buckets[WEDNESDAY][0].subject == "Offsite"

    def test_period_ending_at_midnight_stays_on_its_day(self):
        periods = [busy("2024-03-18 23:00", "2024-03-19 00:00")]

        buckets = IntervalNormalizer().bucket_by_day(periods, MONDAY, TUESDAY)

        assert len(buckets[MONDAY]) == 1
        assert buckets[TUESDAY] == []

    def test_splitting_can_be_disabled(self):
        periods = [busy("2024-03-18 22:00", "2024-03-19 09:00")]

        buckets = IntervalNormalizer(split_across_midnight=False).bucket_by_day(periods, MONDAY, TUESDAY)

        assert buckets[MONDAY] == periods
        assert buckets[TUESDAY] == []
