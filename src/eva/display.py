"""Text and JSON rendering of tasks, segments and schedules."""

import json
from datetime import datetime, timedelta, tzinfo

from .core.schedule import Schedule
from .core.segments import TimeSegment
from .core.tasks import Task


def format_datetime(dt: datetime, tz: tzinfo, today: datetime | None = None) -> str:
    """Short local date/time; the year is only shown when it isn't this year's."""
    local = dt.astimezone(tz)
    today = today or datetime.now(tz)
    if local.year == today.year:
        return f"{local:%a} {local.day} {local:%b} {local.hour}:{local:%M}"
    return f"{local:%a} {local.day} {local:%b %Y} {local.hour}:{local:%M}"


def format_hours(hours: float) -> str:
    """Format a duration like '2h', '1h30'."""
    minutes = round(hours * 60)
    h, m = divmod(minutes, 60)
    return f"{h}h{m:02d}" if m else f"{h}h"


def format_task_line(task: Task, tz: tzinfo, today: datetime | None = None) -> str:
    prefix = f"{task.id}. "
    return (
        f"{prefix}{task.content}\n"
        f"{' ' * len(prefix)}(deadline: {format_datetime(task.deadline, tz, today)}, "
        f"duration: {format_hours(task.duration)}, importance: {task.importance})"
    )


def format_tasks(tasks: list[Task], tz: tzinfo, today: datetime | None = None) -> str:
    if not tasks:
        return "No tasks."
    lines = ["Tasks:"]
    for task in tasks:
        lines.append("  " + format_task_line(task, tz, today).replace("\n", "\n  "))
    return "\n".join(lines)


def format_schedule(
    schedule: Schedule,
    tasks: list[Task],
    tz: tzinfo,
    today: datetime | None = None,
) -> str:
    """Render the timeline followed by warnings for late and unplaced tasks."""
    by_id = {t.id: t for t in tasks}
    if not schedule.blocks and not schedule.statuses:
        return "Nothing to schedule."

    lines = ["Schedule:"]
    for block in schedule.blocks:
        task = by_id[block.task_id]
        end = block.end.astimezone(tz)
        if end.date() == block.start.astimezone(tz).date():
            end_text = f"{end.hour}:{end:%M}"
        else:
            end_text = format_datetime(block.end, tz, today)
        lines.append(
            f"  {format_datetime(block.start, tz, today)}-{end_text}: "
            f"{task.id}. {task.content} ({format_hours(block.duration)})"
        )

    overdue = schedule.overdue()
    if overdue:
        lines.append("")
        lines.append("Overdue (scheduled, but finishing after the deadline):")
        for tid in overdue:
            task = by_id[tid]
            lines.append(f"  {tid}. {task.content} (deadline: {format_datetime(task.deadline, tz, today)})")

    unschedulable = schedule.unschedulable()
    if unschedulable:
        lines.append("")
        lines.append("Could not be scheduled (no free time in their time segment):")
        for tid in unschedulable:
            lines.append(f"  {tid}. {by_id[tid].content}")

    return "\n".join(lines)


def format_segments(segments: list[TimeSegment], tz: tzinfo, today: datetime | None = None) -> str:
    if not segments:
        return "No time segments."
    lines = ["Time segments:"]
    for segment in segments:
        lines.append(
            f"  {segment.id}. {segment.name} (every {format_hours(segment.period / timedelta(hours=1))}, "
            f"from {format_datetime(segment.anchor_start, tz, today)})"
        )
        for r in segment.ranges:
            lines.append(f"       {format_datetime(r.start, tz, today)} - {format_datetime(r.end, tz, today)}")
    return "\n".join(lines)


# ============== JSON ==============


def task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "content": task.content,
        "deadline": task.deadline.isoformat(),
        "duration": task.duration,
        "importance": task.importance,
        "time_segment_id": task.time_segment_id,
    }


def segment_to_dict(segment: TimeSegment) -> dict:
    return {
        "id": segment.id,
        "name": segment.name,
        "start": segment.anchor_start.isoformat(),
        "period_hours": segment.period / timedelta(hours=1),
        "ranges": [{"start": r.start.isoformat(), "end": r.end.isoformat()} for r in segment.ranges],
    }


def schedule_to_json(schedule: Schedule) -> str:
    return json.dumps(
        {
            "blocks": [
                {
                    "task_id": b.task_id,
                    "start": b.start.isoformat(),
                    "end": b.end.isoformat(),
                }
                for b in schedule.blocks
            ],
            "statuses": {str(tid): status.value for tid, status in schedule.statuses.items()},
        },
        indent=2,
    )
