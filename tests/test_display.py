"""Tests for rendering tasks, segments and schedules."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from eva.core.schedule import Schedule, ScheduledBlock, TaskStatus
from eva.core.segments import TimeSegment, TimeSegmentRange
from eva.core.tasks import Task
from eva.display import (
    format_datetime,
    format_hours,
    format_schedule,
    format_segments,
    format_task_line,
    format_tasks,
    schedule_to_json,
    segment_to_dict,
    task_to_dict,
)


@pytest.fixture
def today():
    return datetime(2025, 1, 13, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def tasks(today):
    return [
        Task(id=1, content="Write report", deadline=today.replace(hour=17), duration=1.5, importance=8),
        Task(id=2, content="Call plumber", deadline=today.replace(hour=12), duration=0.25, importance=3),
        Task(id=3, content="Learn Dutch", deadline=today + timedelta(days=30), duration=200, importance=4),
    ]


class TestFormatting:
    def test_datetime_this_year(self, today):
        assert format_datetime(today.replace(hour=9), timezone.utc, today) == "Mon 13 Jan 9:00"

    def test_datetime_other_year(self, today):
        dt = datetime(2026, 3, 2, 14, 5, tzinfo=timezone.utc)
        assert format_datetime(dt, timezone.utc, today) == "Mon 2 Mar 2026 14:05"

    @pytest.mark.parametrize("hours,expected", [(2, "2h"), (1.5, "1h30"), (0.25, "0h15")])
    def test_hours(self, hours, expected):
        assert format_hours(hours) == expected

    def test_task_line(self, tasks, today):
        assert format_task_line(tasks[0], timezone.utc, today) == (
            "1. Write report\n"
            "   (deadline: Mon 13 Jan 17:00, duration: 1h30, importance: 8)"
        )

    def test_tasks(self, tasks, today):
        text = format_tasks(tasks, timezone.utc, today)
        assert text.startswith("Tasks:\n  1. Write report\n     (deadline")
        assert "3. Learn Dutch" in text

    def test_no_tasks(self):
        assert format_tasks([], timezone.utc) == "No tasks."


class TestFormatSchedule:
    def test_blocks_and_warnings(self, tasks, today):
        schedule = Schedule(
            blocks=[
                ScheduledBlock(1, today.replace(hour=9), today.replace(hour=10, minute=30)),
                ScheduledBlock(2, today.replace(hour=12), today.replace(hour=12, minute=15)),
            ],
            statuses={1: TaskStatus.ON_TIME, 2: TaskStatus.OVERDUE, 3: TaskStatus.UNSCHEDULABLE},
        )

        text = format_schedule(schedule, tasks, timezone.utc, today)

        assert "Mon 13 Jan 9:00-10:30: 1. Write report (1h30)" in text
        assert "Mon 13 Jan 12:00-12:15: 2. Call plumber (0h15)" in text
        assert "Overdue" in text
        assert "  2. Call plumber (deadline: Mon 13 Jan 12:00)" in text
        assert "Could not be scheduled" in text
        assert "  3. Learn Dutch" in text

    def test_block_past_midnight_shows_end_date(self, tasks, today):
        schedule = Schedule(
            blocks=[ScheduledBlock(3, today.replace(hour=20), today.replace(hour=6) + timedelta(days=1))],
            statuses={3: TaskStatus.ON_TIME},
        )
        text = format_schedule(schedule, tasks, timezone.utc, today)
        assert "Mon 13 Jan 20:00-Tue 14 Jan 6:00: 3. Learn Dutch (10h)" in text

    def test_empty(self, tasks):
        assert format_schedule(Schedule(), tasks, timezone.utc) == "Nothing to schedule."

    def test_no_warnings_when_all_on_time(self, tasks, today):
        schedule = Schedule(
            blocks=[ScheduledBlock(1, today.replace(hour=9), today.replace(hour=10, minute=30))],
            statuses={1: TaskStatus.ON_TIME},
        )
        text = format_schedule(schedule, tasks, timezone.utc, today)
        assert "Overdue" not in text
        assert "Could not be scheduled" not in text


class TestSegments:
    @pytest.fixture
    def segment(self, today):
        start = today.replace(hour=0)
        return TimeSegment(
            id=1,
            name="Work",
            anchor_start=start,
            period=timedelta(days=1),
            ranges=(TimeSegmentRange(1, start + timedelta(hours=9), start + timedelta(hours=17)),),
        )

    def test_format(self, segment, today):
        text = format_segments([segment], timezone.utc, today)
        assert "1. Work (every 24h, from Mon 13 Jan 0:00)" in text
        assert "Mon 13 Jan 9:00 - Mon 13 Jan 17:00" in text

    def test_to_dict(self, segment):
        data = segment_to_dict(segment)
        assert data["period_hours"] == 24
        assert data["ranges"] == [
            {"start": "2025-01-13T09:00:00+00:00", "end": "2025-01-13T17:00:00+00:00"}
        ]


class TestJson:
    def test_task_to_dict(self, tasks):
        assert task_to_dict(tasks[0]) == {
            "id": 1,
            "content": "Write report",
            "deadline": "2025-01-13T17:00:00+00:00",
            "duration": 1.5,
            "importance": 8,
            "time_segment_id": 0,
        }

    def test_schedule_to_json(self, today):
        schedule = Schedule(
            blocks=[ScheduledBlock(1, today.replace(hour=9), today.replace(hour=10))],
            statuses={1: TaskStatus.ON_TIME, 2: TaskStatus.UNSCHEDULABLE},
        )
        data = json.loads(schedule_to_json(schedule))
        assert data["blocks"] == [
            {"task_id": 1, "start": "2025-01-13T09:00:00+00:00", "end": "2025-01-13T10:00:00+00:00"}
        ]
        assert data["statuses"] == {"1": "on-time", "2": "unschedulable"}
