"""Greedy allocation of tasks onto available time."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Mapping

from .availability import resolve_windows
from .errors import InvalidTask
from .segments import TimeSegment, validate_segment
from .strategy import Strategy, order_tasks
from .tasks import Task, validate_task

logger = logging.getLogger(__name__)

DEFAULT_HORIZON = timedelta(days=365)


class TaskStatus(Enum):
    """Outcome of scheduling a single task."""

    ON_TIME = "on-time"
    OVERDUE = "overdue"  # fully scheduled, but finishes after the deadline
    UNSCHEDULABLE = "unschedulable"  # no room before the horizon


@dataclass(frozen=True)
class ScheduledBlock:
    """An uninterrupted stretch of time spent on one task."""

    task_id: int
    start: datetime
    end: datetime

    @property
    def duration(self) -> float:
        """Length in hours."""
        return (self.end - self.start).total_seconds() / 3600

    def overlaps(self, other: "ScheduledBlock") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass
class Schedule:
    """Timeline produced by one scheduling run."""

    blocks: list[ScheduledBlock] = field(default_factory=list)
    statuses: dict[int, TaskStatus] = field(default_factory=dict)

    def blocks_for(self, task_id: int) -> list[ScheduledBlock]:
        return [b for b in self.blocks if b.task_id == task_id]

    def status(self, task_id: int) -> TaskStatus:
        return self.statuses[task_id]

    def overdue(self) -> list[int]:
        """Ids of tasks that are scheduled but finish late."""
        return [tid for tid, s in self.statuses.items() if s == TaskStatus.OVERDUE]

    def unschedulable(self) -> list[int]:
        """Ids of tasks that could not be placed at all."""
        return [tid for tid, s in self.statuses.items() if s == TaskStatus.UNSCHEDULABLE]


def _validate(tasks: list[Task], segments: Mapping[int, TimeSegment]) -> None:
    seen: set[int] = set()
    for task in tasks:
        if task.id in seen:
            raise InvalidTask(task.id, "duplicate task id")
        seen.add(task.id)
        validate_task(task, segments)
        validate_segment(segments[task.time_segment_id])


def schedule(
    tasks: Iterable[Task],
    segments: Mapping[int, TimeSegment],
    strategy: Strategy,
    now: datetime,
    horizon: timedelta = DEFAULT_HORIZON,
) -> Schedule:
    """
    Lay tasks out on a single, non-overlapping timeline.

    Tasks are taken one at a time in strategy order. Each one is poured into
    the free windows of its time segment, starting at the cursor (the end of
    everything scheduled so far) and split across windows when it does not
    fit in one. Nothing scheduled earlier is ever moved.

    Pure function - no I/O.

    Args:
        tasks: Snapshot of the tasks to schedule
        segments: Time segments by id, with their ranges
        strategy: Ordering that decides which task goes first
        now: Earliest instant anything may be scheduled
        horizon: How far past now to look for free time

    Returns:
        Schedule with blocks sorted by start and a status for every task

    Raises:
        InvalidTask, InvalidSegment: if the snapshot is malformed. Nothing
        is scheduled in that case.
    """
    tasks = list(tasks)
    _validate(tasks, segments)

    limit = now + horizon
    cursor = now
    result = Schedule()

    for task in order_tasks(tasks, strategy):
        remaining = task.duration_delta
        placed: list[ScheduledBlock] = []
        task_cursor = cursor

        for window in resolve_windows(segments[task.time_segment_id], max(cursor, now), limit):
            start = max(window.start, task_cursor)
            if start >= window.end:
                continue
            # start + remaining may lie past the last representable datetime
            end = window.end if remaining >= window.end - start else start + remaining
            placed.append(ScheduledBlock(task.id, start, end))
            logger.debug(f"Task {task.id}: {start.isoformat()} - {end.isoformat()}")
            remaining -= end - start
            task_cursor = end
            if remaining <= timedelta(0):
                break

        if not placed or remaining > timedelta(0):
            # Nothing placed, or the horizon cut the task short. Either way
            # it is given up on and its time stays free for later tasks.
            logger.warning(f"Task {task.id} could not be scheduled before {limit.isoformat()}")
            result.statuses[task.id] = TaskStatus.UNSCHEDULABLE
            continue

        cursor = task_cursor
        result.blocks.extend(placed)
        if placed[-1].end > task.deadline:
            logger.warning(f"Task {task.id} finishes after its deadline ({task.deadline.isoformat()})")
            result.statuses[task.id] = TaskStatus.OVERDUE
        else:
            result.statuses[task.id] = TaskStatus.ON_TIME

    return result
