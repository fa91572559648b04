"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .segment_repo import TimeSegmentRepository
from .clock import Clock

__all__ = [
    "TaskRepository",
    "TimeSegmentRepository",
    "Clock",
]
