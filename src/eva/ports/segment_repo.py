"""Time segment repository interface."""

from datetime import datetime, timedelta
from typing import Protocol

from eva.core.segments import TimeSegment, TimeSegmentRange


class TimeSegmentRepository(Protocol):
    """Interface for storing time segments and their ranges."""

    def get_segment(self, segment_id: int) -> TimeSegment:
        """Fetch a segment, including its ranges."""
        ...

    def list_ranges(self, segment_id: int) -> set[TimeSegmentRange]:
        """Fetch the ranges of a segment."""
        ...

    def list_segments(self) -> list[TimeSegment]:
        """All segments, ordered by id."""
        ...

    def add_segment(
        self,
        name: str,
        anchor_start: datetime,
        period: timedelta,
        ranges: list[tuple[datetime, datetime]],
    ) -> TimeSegment:
        """Create a segment and return it with its new id."""
        ...

    def update_segment(self, segment: TimeSegment) -> None:
        """Overwrite an existing segment and replace its ranges."""
        ...

    def delete_segment(self, segment_id: int) -> None:
        """Remove a segment that no task uses."""
        ...
