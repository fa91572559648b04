"""Task ordering strategies."""

from datetime import datetime
from enum import Enum
from typing import Iterable

from .tasks import Task


class Strategy(Enum):
    """Which tasks get first pick of the available time."""

    IMPORTANCE = "importance"  # most important first
    URGENCY = "urgency"  # earliest deadline first

    @classmethod
    def parse(cls, name: str) -> "Strategy":
        """Look up a strategy by name. Raises ValueError for unknown names."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown scheduling strategy '{name}' (choose from: {choices})") from None


def _importance_key(t: Task) -> tuple[int, datetime, int]:
    return (-t.importance, t.deadline, t.id)


def _urgency_key(t: Task) -> tuple[datetime, int, int]:
    return (t.deadline, -t.importance, t.id)


_SORT_KEYS = {
    Strategy.IMPORTANCE: _importance_key,
    Strategy.URGENCY: _urgency_key,
}


def order_tasks(tasks: Iterable[Task], strategy: Strategy) -> list[Task]:
    """
    Sort tasks into scheduling order.

    importance: importance (desc), then deadline (asc), then id.
    urgency: deadline (asc), then importance (desc), then id.

    Pure function - no I/O.
    """
    return sorted(tasks, key=_SORT_KEYS[strategy])
