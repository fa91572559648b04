"""Structural errors raised by the scheduling core."""


class SchedulingError(ValueError):
    """Base class for inputs the scheduler refuses to work with."""

    pass


class InvalidTask(SchedulingError):
    """A task with a non-positive duration, bad importance or unknown segment."""

    def __init__(self, task_id: int | None, reason: str):
        self.task_id = task_id
        self.reason = reason
        subject = f"Task {task_id}" if task_id is not None else "The task"
        super().__init__(f"{subject} is invalid: {reason}")


class InvalidSegment(SchedulingError):
    """A time segment with a non-positive period or a malformed range."""

    def __init__(self, segment_id: int | None, reason: str):
        self.segment_id = segment_id
        self.reason = reason
        subject = f"Time segment {segment_id}" if segment_id is not None else "The time segment"
        super().__init__(f"{subject} is invalid: {reason}")
