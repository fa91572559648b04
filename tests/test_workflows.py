"""Tests for the shared workflow layer."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from eva.adapters.clock import FixedClock, SystemClock
from eva.config import Config
from eva.core.errors import InvalidTask
from eva.core.schedule import ScheduledBlock, TaskStatus
from eva.core.segments import TimeSegment
from eva.core.strategy import Strategy
from eva.core.tasks import Task
from eva.workflows import build_schedule, get_store, load_snapshot


@pytest.fixture
def monday():
    return datetime(2025, 1, 13, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path):
    return Config(database=str(tmp_path / "data" / "db.sqlite"), schedule_delay_minutes=0)


@pytest.fixture
def store(config):
    s = get_store(config)
    yield s
    s.close()


class TestGetStore:
    def test_creates_database_directory(self, config, tmp_path):
        store = get_store(config)
        assert (tmp_path / "data" / "db.sqlite").exists()
        store.close()


class TestLoadSnapshot:
    def test_only_referenced_segments(self, store, monday):
        work = store.add_segment(
            "Work", monday, timedelta(days=1), [(monday, monday + timedelta(hours=8))]
        )
        store.add_segment("Unused", monday, timedelta(days=1), [(monday, monday + timedelta(hours=1))])
        store.add_task("Report", monday + timedelta(days=1), 2, 5, time_segment_id=work.id)

        tasks, segments = load_snapshot(store, store)

        assert [t.content for t in tasks] == ["Report"]
        assert list(segments) == [work.id]
        assert segments[work.id].ranges

    def test_segments_come_from_one_listing(self, monday):
        work = TimeSegment(id=1, name="Work", anchor_start=monday, period=timedelta(days=1))
        task = Task(id=1, content="Report", deadline=monday, duration=1, importance=5, time_segment_id=1)
        task_repo = MagicMock()
        task_repo.list_tasks.return_value = [task]
        segment_repo = MagicMock()
        segment_repo.list_segments.return_value = [work]

        _, segments = load_snapshot(task_repo, segment_repo)

        assert segments == {1: work}
        segment_repo.list_segments.assert_called_once()
        segment_repo.get_segment.assert_not_called()

    def test_missing_segment_left_out(self, monday):
        task = Task(id=1, content="Orphan", deadline=monday, duration=1, importance=5, time_segment_id=7)
        task_repo = MagicMock()
        task_repo.list_tasks.return_value = [task]
        segment_repo = MagicMock()
        segment_repo.list_segments.return_value = []

        tasks, segments = load_snapshot(task_repo, segment_repo)

        assert tasks == [task]
        assert segments == {}
        segment_repo.get_segment.assert_not_called()


class TestBuildSchedule:
    def test_schedules_into_default_segment(self, config, store, monday):
        task = store.add_task("Report", monday + timedelta(days=1), 2, 5)

        result, tasks = build_schedule(config, store, clock=FixedClock(monday))

        assert tasks == [task]
        assert result.blocks == [ScheduledBlock(task.id, monday, monday + timedelta(hours=2))]
        assert result.status(task.id) == TaskStatus.ON_TIME

    def test_applies_start_delay(self, config, store, monday):
        config.schedule_delay_minutes = 1
        task = store.add_task("Report", monday + timedelta(days=1), 1, 5)

        result, _ = build_schedule(config, store, clock=FixedClock(monday))

        assert result.blocks[0].start == monday + timedelta(minutes=1)

    def test_strategy_override(self, config, store, monday):
        important = store.add_task("Important", monday + timedelta(days=5), 1, 9)
        urgent = store.add_task("Urgent", monday + timedelta(days=1), 1, 2)

        by_importance, _ = build_schedule(config, store, clock=FixedClock(monday))
        by_urgency, _ = build_schedule(config, store, strategy=Strategy.URGENCY, clock=FixedClock(monday))

        assert by_importance.blocks[0].task_id == important.id
        assert by_urgency.blocks[0].task_id == urgent.id

    def test_respects_horizon(self, config, store, monday):
        config.horizon_days = 1
        later = monday + timedelta(days=3)
        segment = store.add_segment("Later", later, timedelta(days=7), [(later, later + timedelta(hours=4))])
        task = store.add_task("Someday", later + timedelta(days=1), 1, 5, time_segment_id=segment.id)

        result, _ = build_schedule(config, store, clock=FixedClock(monday))

        assert result.status(task.id) == TaskStatus.UNSCHEDULABLE

    def test_invalid_snapshot_raises(self, config, monday):
        task = Task(id=1, content="Orphan", deadline=monday, duration=1, importance=5, time_segment_id=7)
        store = MagicMock()
        store.list_tasks.return_value = [task]
        store.list_segments.return_value = []

        with pytest.raises(InvalidTask):
            build_schedule(config, store, clock=FixedClock(monday))


class TestClocks:
    def test_system_clock_is_utc(self):
        before = datetime.now(timezone.utc)
        now = SystemClock().now()
        assert now.tzinfo == timezone.utc
        assert before <= now <= datetime.now(timezone.utc)

    def test_fixed_clock(self, monday):
        clock = FixedClock(monday)
        assert clock.now() == monday
        assert clock.now() == monday
