"""Clock adapters."""

from datetime import datetime, timezone


class SystemClock:
    """
    Wall clock.

    Implements Clock protocol.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock stuck at a single instant, for reproducible runs."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
