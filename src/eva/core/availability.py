"""
Expansion of recurring time segments into concrete windows.

Segments recur forever, so windows are produced lazily and always up to a
finite horizon. Callers pull as many as they need.
"""

import heapq
from datetime import datetime, timedelta
from typing import Iterable, Iterator

from .segments import TimeSegment, TimeSegmentRange, Window


def range_occurrences(
    time_range: TimeSegmentRange,
    period: timedelta,
    start: datetime,
    horizon: datetime,
) -> Iterator[Window]:
    """
    Yield the occurrences of a single range clipped to [start, horizon).

    Occurrences that ended at or before start are skipped arithmetically
    rather than walked through.
    """
    k = 0
    if time_range.end <= start:
        k = (start - time_range.end) // period + 1

    while True:
        occurrence_start = time_range.start + k * period
        if occurrence_start >= horizon:
            return
        occurrence_end = time_range.end + k * period
        yield Window(max(occurrence_start, start), min(occurrence_end, horizon))
        k += 1


def coalesce(windows: Iterable[Window]) -> Iterator[Window]:
    """Merge overlapping or touching windows of an ascending sequence."""
    pending = None
    for window in windows:
        if pending is None:
            pending = window
        elif window.start <= pending.end:
            if window.end > pending.end:
                pending = Window(pending.start, window.end)
        else:
            yield pending
            pending = window

    if pending is not None:
        yield pending


def resolve_windows(
    segment: TimeSegment,
    start: datetime,
    horizon: datetime,
) -> Iterator[Window]:
    """
    Lazily yield the segment's free windows within [start, horizon), ascending.

    Pure function - no I/O.

    Args:
        segment: Time segment whose ranges recur every segment.period
        start: Earliest instant of interest; windows are clipped to it
        horizon: Instant past which nothing is produced (must be finite)

    Returns:
        Iterator of non-overlapping Windows sorted by start
    """
    if start >= horizon:
        return iter(())

    per_range = [
        range_occurrences(r, segment.period, start, horizon)
        for r in segment.ranges
    ]
    return coalesce(heapq.merge(*per_range, key=lambda w: w.start))
