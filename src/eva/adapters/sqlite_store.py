"""SQLite storage adapter for tasks and time segments."""

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from eva.core.segments import TimeSegment, TimeSegmentRange, validate_segment
from eva.core.tasks import Task, validate_task

logger = logging.getLogger(__name__)

DEFAULT_SEGMENT_ID = 0
DEFAULT_SEGMENT_PERIOD = timedelta(weeks=1)

SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
  id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
  content TEXT NOT NULL,
  deadline INTEGER NOT NULL,
  duration REAL NOT NULL,
  importance INTEGER NOT NULL,
  time_segment_id INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS time_segments (
  id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
  name TEXT NOT NULL,
  start INTEGER NOT NULL,
  period INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS time_segment_ranges (
  segment_id INTEGER NOT NULL,
  start INTEGER NOT NULL,
  end INTEGER NOT NULL
);
"""


class StoreError(Exception):
    """Raised when a storage operation cannot be carried out."""

    pass


def _to_timestamp(dt: datetime) -> int:
    return int(dt.timestamp())


def _from_timestamp(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class SqliteStore:
    """
    SQLite-backed storage.

    Implements TaskRepository and TimeSegmentRepository protocols. Instants
    are stored as unix seconds, periods as seconds and task durations as
    hours. A fresh database gets a "Default" segment that is always
    available, so tasks have somewhere to go before any segment is defined.
    """

    def __init__(self, path: Path | str):
        self.path = str(path)
        self._con = sqlite3.connect(self.path)
        self._con.row_factory = sqlite3.Row
        self._migrate()

    def _migrate(self) -> None:
        with self._con:
            self._con.executescript(SCHEMA)
            row = self._con.execute("SELECT COUNT(*) FROM time_segments").fetchone()
            if row[0] == 0:
                logger.info("Seeding default time segment")
                epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
                self._con.execute(
                    "INSERT INTO time_segments(id, name, start, period) VALUES(?, ?, ?, ?)",
                    (DEFAULT_SEGMENT_ID, "Default", 0, int(DEFAULT_SEGMENT_PERIOD.total_seconds())),
                )
                self._con.execute(
                    "INSERT INTO time_segment_ranges(segment_id, start, end) VALUES(?, ?, ?)",
                    (DEFAULT_SEGMENT_ID, 0, _to_timestamp(epoch + DEFAULT_SEGMENT_PERIOD)),
                )

    def close(self) -> None:
        self._con.close()

    # ============== Tasks ==============

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            content=row["content"],
            deadline=_from_timestamp(row["deadline"]),
            duration=row["duration"],
            importance=row["importance"],
            time_segment_id=row["time_segment_id"],
        )

    def _segment_ids(self) -> set[int]:
        return {row["id"] for row in self._con.execute("SELECT id FROM time_segments")}

    def list_tasks(self) -> list[Task]:
        rows = self._con.execute("SELECT * FROM tasks ORDER BY id").fetchall()
        return [self._row_to_task(r) for r in rows]

    def get_task(self, task_id: int) -> Task:
        row = self._con.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise StoreError(f"There is no task with id {task_id}")
        return self._row_to_task(row)

    def add_task(
        self,
        content: str,
        deadline: datetime,
        duration: float,
        importance: int,
        time_segment_id: int = DEFAULT_SEGMENT_ID,
    ) -> Task:
        draft = Task(
            id=0,
            content=content,
            deadline=deadline,
            duration=duration,
            importance=importance,
            time_segment_id=time_segment_id,
        )
        validate_task(draft, self._segment_ids())

        with self._con:
            cur = self._con.execute(
                "INSERT INTO tasks(content, deadline, duration, importance, time_segment_id) "
                "VALUES(?, ?, ?, ?, ?)",
                (content, _to_timestamp(deadline), duration, importance, time_segment_id),
            )
        logger.debug(f"Added task {cur.lastrowid}")
        return self.get_task(cur.lastrowid)

    def update_task(self, task: Task) -> None:
        validate_task(task, self._segment_ids())
        with self._con:
            cur = self._con.execute(
                "UPDATE tasks SET content = ?, deadline = ?, duration = ?, importance = ?, "
                "time_segment_id = ? WHERE id = ?",
                (
                    task.content,
                    _to_timestamp(task.deadline),
                    task.duration,
                    task.importance,
                    task.time_segment_id,
                    task.id,
                ),
            )
        if cur.rowcount != 1:
            raise StoreError(f"There is no task with id {task.id}")

    def delete_task(self, task_id: int) -> None:
        with self._con:
            cur = self._con.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        if cur.rowcount != 1:
            raise StoreError(f"There is no task with id {task_id}")

    # ============== Time segments ==============

    def list_ranges(self, segment_id: int) -> set[TimeSegmentRange]:
        rows = self._con.execute(
            "SELECT * FROM time_segment_ranges WHERE segment_id = ?", (segment_id,)
        ).fetchall()
        return {
            TimeSegmentRange(
                segment_id=r["segment_id"],
                start=_from_timestamp(r["start"]),
                end=_from_timestamp(r["end"]),
            )
            for r in rows
        }

    def _row_to_segment(self, row: sqlite3.Row) -> TimeSegment:
        ranges = sorted(self.list_ranges(row["id"]), key=lambda r: (r.start, r.end))
        return TimeSegment(
            id=row["id"],
            name=row["name"],
            anchor_start=_from_timestamp(row["start"]),
            period=timedelta(seconds=row["period"]),
            ranges=tuple(ranges),
        )

    def get_segment(self, segment_id: int) -> TimeSegment:
        row = self._con.execute(
            "SELECT * FROM time_segments WHERE id = ?", (segment_id,)
        ).fetchone()
        if row is None:
            raise StoreError(f"There is no time segment with id {segment_id}")
        return self._row_to_segment(row)

    def list_segments(self) -> list[TimeSegment]:
        rows = self._con.execute("SELECT * FROM time_segments ORDER BY id").fetchall()
        return [self._row_to_segment(r) for r in rows]

    def _insert_ranges(self, segment: TimeSegment) -> None:
        self._con.executemany(
            "INSERT INTO time_segment_ranges(segment_id, start, end) VALUES(?, ?, ?)",
            [(segment.id, _to_timestamp(r.start), _to_timestamp(r.end)) for r in segment.ranges],
        )

    def add_segment(
        self,
        name: str,
        anchor_start: datetime,
        period: timedelta,
        ranges: list[tuple[datetime, datetime]],
    ) -> TimeSegment:
        # Validate before touching the database; the id is filled in below.
        draft = TimeSegment(
            id=-1,
            name=name,
            anchor_start=anchor_start,
            period=period,
            ranges=tuple(TimeSegmentRange(-1, start, end) for start, end in ranges),
        )
        validate_segment(draft)

        with self._con:
            cur = self._con.execute(
                "INSERT INTO time_segments(name, start, period) VALUES(?, ?, ?)",
                (name, _to_timestamp(anchor_start), int(period.total_seconds())),
            )
            segment_id = cur.lastrowid
            self._insert_ranges(
                TimeSegment(
                    id=segment_id,
                    name=name,
                    anchor_start=anchor_start,
                    period=period,
                    ranges=tuple(TimeSegmentRange(segment_id, start, end) for start, end in ranges),
                )
            )
        logger.debug(f"Added time segment {segment_id} ({name})")
        return self.get_segment(segment_id)

    def update_segment(self, segment: TimeSegment) -> None:
        validate_segment(segment)
        with self._con:
            cur = self._con.execute(
                "UPDATE time_segments SET name = ?, start = ?, period = ? WHERE id = ?",
                (
                    segment.name,
                    _to_timestamp(segment.anchor_start),
                    int(segment.period.total_seconds()),
                    segment.id,
                ),
            )
            if cur.rowcount != 1:
                raise StoreError(f"There is no time segment with id {segment.id}")
            self._con.execute("DELETE FROM time_segment_ranges WHERE segment_id = ?", (segment.id,))
            self._insert_ranges(segment)

    def delete_segment(self, segment_id: int) -> None:
        self.get_segment(segment_id)

        n_tasks = self._con.execute(
            "SELECT COUNT(*) FROM tasks WHERE time_segment_id = ?", (segment_id,)
        ).fetchone()[0]
        if n_tasks > 0:
            raise StoreError(
                f"There are still {n_tasks} task(s) in this time segment. Move them to another "
                "time segment or delete them before deleting this segment."
            )

        n_segments = self._con.execute("SELECT COUNT(*) FROM time_segments").fetchone()[0]
        if n_segments <= 1:
            raise StoreError("The last time segment cannot be deleted; nothing could be scheduled without it.")

        with self._con:
            self._con.execute("DELETE FROM time_segment_ranges WHERE segment_id = ?", (segment_id,))
            self._con.execute("DELETE FROM time_segments WHERE id = ?", (segment_id,))
