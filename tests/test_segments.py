"""Tests for time segment types and validation."""

from datetime import datetime, timedelta, timezone

import pytest

from eva.core.errors import InvalidSegment
from eva.core.segments import TimeSegment, TimeSegmentRange, Window, validate_segment


@pytest.fixture
def monday():
    return datetime(2025, 1, 13, 0, 0, tzinfo=timezone.utc)


def _segment(monday, period=timedelta(days=1), ranges=((9, 17),)) -> TimeSegment:
    return TimeSegment(
        id=1,
        name="Work",
        anchor_start=monday,
        period=period,
        ranges=tuple(
            TimeSegmentRange(1, monday + timedelta(hours=s), monday + timedelta(hours=e))
            for s, e in ranges
        ),
    )


class TestValidateSegment:
    def test_accepts_workday(self, monday):
        validate_segment(_segment(monday))

    def test_accepts_segment_without_ranges(self, monday):
        validate_segment(_segment(monday, ranges=()))

    def test_accepts_range_spanning_whole_period(self, monday):
        validate_segment(_segment(monday, ranges=((0, 24),)))

    @pytest.mark.parametrize("period", [timedelta(0), timedelta(hours=-1)])
    def test_rejects_non_positive_period(self, monday, period):
        with pytest.raises(InvalidSegment, match="period"):
            validate_segment(_segment(monday, period=period, ranges=()))

    def test_rejects_empty_range(self, monday):
        with pytest.raises(InvalidSegment, match="ends before it starts"):
            validate_segment(_segment(monday, ranges=((9, 9),)))

    def test_rejects_reversed_range(self, monday):
        with pytest.raises(InvalidSegment):
            validate_segment(_segment(monday, ranges=((17, 9),)))

    def test_rejects_range_longer_than_period(self, monday):
        with pytest.raises(InvalidSegment, match="longer than the period"):
            validate_segment(_segment(monday, ranges=((0, 25),)))


class TestWindow:
    def test_length(self, monday):
        window = Window(monday, monday + timedelta(hours=8))
        assert window.length() == timedelta(hours=8)

    def test_contains(self, monday):
        window = Window(monday + timedelta(hours=9), monday + timedelta(hours=17))
        assert window.contains(monday + timedelta(hours=9), monday + timedelta(hours=17))
        assert window.contains(monday + timedelta(hours=10), monday + timedelta(hours=11))
        assert not window.contains(monday + timedelta(hours=8), monday + timedelta(hours=10))
        assert not window.contains(monday + timedelta(hours=16), monday + timedelta(hours=18))
