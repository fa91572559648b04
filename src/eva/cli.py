"""Eva CLI - task scheduler."""

import json
import logging
import sys
from dataclasses import replace
from datetime import timedelta

import click

from .adapters.sqlite_store import StoreError
from .config import ConfigError, load_config
from .core.errors import SchedulingError
from .core.strategy import Strategy
from .display import (
    format_schedule,
    format_segments,
    format_tasks,
    schedule_to_json,
    segment_to_dict,
    task_to_dict,
)
from .parse import (
    ParseError,
    parse_datetime,
    parse_hours,
    parse_id,
    parse_importance,
    parse_range,
)
from .workflows import build_schedule, get_store

# Errors that are the user's to fix; anything else is a bug and gets a traceback.
USER_ERRORS = (ConfigError, ParseError, SchedulingError, StoreError)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _load():
    """
    Load config and open the store, exiting on bad configuration.

    The store is closed when the current command finishes.
    """
    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    store = get_store(config)
    click.get_current_context().call_on_close(store.close)
    return config, store


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Eva - schedules your tasks into your free time."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.argument("content")
@click.argument("deadline")
@click.argument("duration")
@click.argument("importance")
@click.option("--segment", "segment_id", default="0", help="Time segment the task must fit in")
def add(content: str, deadline: str, duration: str, importance: str, segment_id: str):
    """Add a task.

    DEADLINE looks like '2 Aug 2017 14:03', DURATION is a (whole or decimal)
    number of hours and IMPORTANCE goes from 1 to 10.
    """
    config, store = _load()
    try:
        task = store.add_task(
            content=content,
            deadline=parse_datetime(deadline, config.tz),
            duration=parse_hours(duration),
            importance=parse_importance(importance),
            time_segment_id=parse_id(segment_id),
        )
    except USER_ERRORS as e:
        _fail(e)
    click.echo(f"Added task {task.id}.")


@main.command()
@click.argument("task_id")
def rm(task_id: str):
    """Remove a task."""
    _, store = _load()
    try:
        store.delete_task(parse_id(task_id))
    except USER_ERRORS as e:
        _fail(e)


@main.command("set")
@click.argument(
    "field", type=click.Choice(["content", "deadline", "duration", "importance", "segment"])
)
@click.argument("task_id")
@click.argument("value")
def set_field(field: str, task_id: str, value: str):
    """Change a property of an existing task."""
    config, store = _load()
    try:
        task = store.get_task(parse_id(task_id))
        match field:
            case "content":
                task = replace(task, content=value)
            case "deadline":
                task = replace(task, deadline=parse_datetime(value, config.tz))
            case "duration":
                task = replace(task, duration=parse_hours(value))
            case "importance":
                task = replace(task, importance=parse_importance(value))
            case "segment":
                task = replace(task, time_segment_id=parse_id(value))
        store.update_task(task)
    except USER_ERRORS as e:
        _fail(e)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tasks(as_json: bool):
    """List your tasks in the order you added them."""
    config, store = _load()
    all_tasks = store.list_tasks()

    if as_json:
        click.echo(json.dumps([task_to_dict(t) for t in all_tasks], indent=2))
    else:
        click.echo(format_tasks(all_tasks, config.tz))


@main.command()
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in Strategy]),
    default=None,
    help="Override the configured scheduling strategy",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def schedule(strategy: str | None, as_json: bool):
    """Suggest a schedule for your tasks."""
    config, store = _load()
    try:
        result, all_tasks = build_schedule(
            config,
            store,
            strategy=Strategy(strategy) if strategy else None,
        )
    except USER_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(schedule_to_json(result))
    else:
        click.echo(format_schedule(result, all_tasks, config.tz))


@main.group(invoke_without_command=True)
@click.pass_context
def segments(ctx):
    """Manage time segments (when tasks may be scheduled)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(segments_list)


@segments.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def segments_list(as_json: bool = False):
    """List time segments and their ranges."""
    config, store = _load()
    all_segments = store.list_segments()

    if as_json:
        click.echo(json.dumps([segment_to_dict(s) for s in all_segments], indent=2))
    else:
        click.echo(format_segments(all_segments, config.tz))


@segments.command("add")
@click.argument("name")
@click.argument("start")
@click.argument("period")
@click.option(
    "--range",
    "ranges",
    multiple=True,
    required=True,
    help="Active hours as FROM:TO offsets from START, e.g. 9:17 (repeatable)",
)
def segments_add(name: str, start: str, period: str, ranges: tuple[str, ...]):
    """Add a time segment.

    START is when the first period begins, PERIOD its length in hours
    (24 for daily, 168 for weekly).
    """
    config, store = _load()
    try:
        anchor = parse_datetime(start, config.tz, what="start")
        period_delta = timedelta(hours=parse_hours(period, what="period"))
        absolute = []
        for text in ranges:
            offset_start, offset_end = parse_range(text)
            absolute.append((anchor + offset_start, anchor + offset_end))
        segment = store.add_segment(name, anchor, period_delta, absolute)
    except USER_ERRORS as e:
        _fail(e)
    click.echo(f"Added time segment {segment.id}.")


@segments.command("rm")
@click.argument("segment_id")
def segments_rm(segment_id: str):
    """Remove a time segment no task uses."""
    _, store = _load()
    try:
        store.delete_segment(parse_id(segment_id))
    except USER_ERRORS as e:
        _fail(e)


if __name__ == "__main__":
    main()
