"""Shared workflow layer between the CLI and any other front end.

Opens storage, takes a snapshot of tasks and segments, and runs the
scheduler on it.
"""

import logging
from datetime import timedelta

from .adapters.clock import SystemClock
from .adapters.sqlite_store import SqliteStore
from .config import Config
from .core.schedule import Schedule, schedule
from .core.segments import TimeSegment
from .core.strategy import Strategy
from .core.tasks import Task
from .ports import Clock, TaskRepository, TimeSegmentRepository

logger = logging.getLogger(__name__)


def get_store(config: Config) -> SqliteStore:
    """Open the configured database, creating its directory if needed."""
    path = config.database_path
    path.parent.mkdir(parents=True, exist_ok=True)
    return SqliteStore(path)


def load_snapshot(
    task_repo: TaskRepository,
    segment_repo: TimeSegmentRepository,
) -> tuple[list[Task], dict[int, TimeSegment]]:
    """
    Read every task plus the time segments they refer to.

    Segments no task uses are left out. A task pointing at a missing
    segment is left for the scheduler to reject.
    """
    tasks = task_repo.list_tasks()
    used = {t.time_segment_id for t in tasks}

    segments: dict[int, TimeSegment] = {
        s.id: s for s in segment_repo.list_segments() if s.id in used
    }
    return tasks, segments


def build_schedule(
    config: Config,
    store: SqliteStore,
    strategy: Strategy | None = None,
    clock: Clock | None = None,
) -> tuple[Schedule, list[Task]]:
    """Schedule everything in the store. Returns the schedule and the tasks it covers."""
    strategy = strategy or config.strategy
    clock = clock or SystemClock()
    now = clock.now() + timedelta(minutes=config.schedule_delay_minutes)

    tasks, segments = load_snapshot(store, store)
    logger.info(f"Scheduling {len(tasks)} task(s) by {strategy.value} from {now.isoformat()}")

    result = schedule(
        tasks,
        segments,
        strategy,
        now,
        horizon=timedelta(days=config.horizon_days),
    )
    return result, tasks
