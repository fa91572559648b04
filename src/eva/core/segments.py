"""Pure time segment domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .errors import InvalidSegment


@dataclass(frozen=True)
class TimeSegmentRange:
    """First occurrence of an active sub-window inside a segment's period."""

    segment_id: int
    start: datetime
    end: datetime

    def length(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class TimeSegment:
    """
    Recurring availability.

    Every range repeats once per period, forever, starting at its own first
    occurrence.
    """

    id: int
    name: str
    anchor_start: datetime
    period: timedelta
    ranges: tuple[TimeSegmentRange, ...] = ()


@dataclass(frozen=True)
class Window:
    """A concrete, bounded interval of free time."""

    start: datetime
    end: datetime

    def length(self) -> timedelta:
        return self.end - self.start

    def contains(self, start: datetime, end: datetime) -> bool:
        """Check if [start, end) lies within this window."""
        return self.start <= start and end <= self.end


def validate_segment(segment: TimeSegment) -> None:
    """Raise InvalidSegment if the segment cannot be expanded into windows."""
    if segment.period <= timedelta(0):
        raise InvalidSegment(segment.id, f"period must be positive, got {segment.period}")

    for r in segment.ranges:
        if r.end <= r.start:
            raise InvalidSegment(
                segment.id,
                f"range {r.start.isoformat()} - {r.end.isoformat()} ends before it starts",
            )
        if r.length() > segment.period:
            raise InvalidSegment(
                segment.id,
                f"range {r.start.isoformat()} - {r.end.isoformat()} is longer than the period ({segment.period})",
            )
