"""Functional core - pure scheduling logic with no I/O."""

from .errors import SchedulingError, InvalidTask, InvalidSegment
from .tasks import Task, validate_task
from .segments import TimeSegment, TimeSegmentRange, Window, validate_segment
from .availability import resolve_windows
from .strategy import Strategy, order_tasks
from .schedule import DEFAULT_HORIZON, Schedule, ScheduledBlock, TaskStatus, schedule

__all__ = [
    # Errors
    "SchedulingError",
    "InvalidTask",
    "InvalidSegment",
    # Tasks
    "Task",
    "validate_task",
    # Segments
    "TimeSegment",
    "TimeSegmentRange",
    "Window",
    "validate_segment",
    "resolve_windows",
    # Scheduling
    "Strategy",
    "order_tasks",
    "DEFAULT_HORIZON",
    "Schedule",
    "ScheduledBlock",
    "TaskStatus",
    "schedule",
]
