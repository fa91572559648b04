"""Task repository interface."""

from datetime import datetime
from typing import Protocol

from eva.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for storing tasks in any backend."""

    def list_tasks(self) -> list[Task]:
        """All tasks, ordered by id."""
        ...

    def get_task(self, task_id: int) -> Task:
        """Fetch a single task."""
        ...

    def add_task(
        self,
        content: str,
        deadline: datetime,
        duration: float,
        importance: int,
        time_segment_id: int = 0,
    ) -> Task:
        """Create a task and return it with its new id."""
        ...

    def update_task(self, task: Task) -> None:
        """Overwrite an existing task."""
        ...

    def delete_task(self, task_id: int) -> None:
        """Remove a task."""
        ...
