"""Pure task domain logic - no I/O dependencies."""

import math
from collections.abc import Container
from dataclasses import dataclass
from datetime import datetime, timedelta

from .errors import InvalidTask

MIN_IMPORTANCE = 1
MAX_IMPORTANCE = 10

# Ten years of around-the-clock work
MAX_DURATION = 24 * 366 * 10


@dataclass(frozen=True)
class Task:
    """A piece of work waiting to be scheduled."""

    id: int
    content: str
    deadline: datetime
    duration: float  # hours
    importance: int
    time_segment_id: int = 0

    @property
    def duration_delta(self) -> timedelta:
        return timedelta(hours=self.duration)


def validate_task(task: Task, segment_ids: Container[int] | None = None) -> None:
    """
    Raise InvalidTask unless the task can be handed to the scheduler.

    When segment_ids is given, the task's time segment must be one of them.
    """
    if not task.duration > 0:
        raise InvalidTask(task.id, f"duration must be positive, got {task.duration}h")
    if not math.isfinite(task.duration) or task.duration > MAX_DURATION:
        raise InvalidTask(task.id, f"duration must be at most {MAX_DURATION}h, got {task.duration}h")
    if not MIN_IMPORTANCE <= task.importance <= MAX_IMPORTANCE:
        raise InvalidTask(
            task.id,
            f"importance must be between {MIN_IMPORTANCE} and {MAX_IMPORTANCE}, got {task.importance}",
        )
    if segment_ids is not None and task.time_segment_id not in segment_ids:
        raise InvalidTask(task.id, f"time segment {task.time_segment_id} does not exist")
