"""frogboard CLI - personal task board."""

import json
import logging
import sys
from datetime import datetime, time

import click
from apscheduler.schedulers.blocking import BlockingScheduler

from .adapters import RepositoryError
from .board import (
    apply_transitions,
    build_board,
    complete_task,
    create_task,
    get_repository,
    reopen_recurring,
)
from .config import Config, load_config
from .core.movement import monitor_stats
from .core.placement import classify, next_occurrence, parse_weekday
from .core.tasks import BOARD_COLUMNS, Priority, Recurrence, Task, as_utc
from .core.timectx import TIMEZONE_OPTIONS, at_time_of_day, now as zoned_now, resolve_zone, to_zone
from .monitor import MovementMonitor


def _now(config: Config) -> datetime:
    return zoned_now(config.timezone)


def _fail(e: Exception):
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_local(value: str | None, tz_name: str) -> datetime | None:
    """Parse 'YYYY-MM-DD HH:MM' as civil time in the user's zone, returned in UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD HH:MM, got {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=resolve_zone(tz_name))
    return as_utc(parsed)


def _describe_when(task: Task, tz_name: str) -> str:
    if task.recurrence is Recurrence.EVERYDAY and task.recurrence_time:
        return f"daily at {to_zone(task.recurrence_time, tz_name):%H:%M}"
    if task.recurrence is Recurrence.EVERYWEEK and task.recurrence_time:
        return f"every {task.recurrence_day} at {to_zone(task.recurrence_time, tz_name):%H:%M}"
    if task.scheduled_time:
        return f"scheduled {to_zone(task.scheduled_time, tz_name):%Y-%m-%d %H:%M}"
    if task.scheduled_date:
        return f"scheduled {task.scheduled_date}"
    if task.deadline:
        return f"due {to_zone(task.deadline, tz_name):%Y-%m-%d %H:%M}"
    return "no date"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.version_option()
def main(verbose: bool):
    """frogboard - Today / This Week / Upcoming / Overdue task board."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def board(as_json: bool):
    """Show the board, sorted, with each column's Big Frog."""
    config = load_config()
    try:
        tasks = get_repository(config).list(config.user_id)
    except RepositoryError as e:
        _fail(e)

    result = build_board(tasks, _now(config), config.timezone)

    if as_json:
        payload = {}
        for column in BOARD_COLUMNS:
            frog = result.big_frogs.get(column)
            payload[column.value] = {
                "tasks": [t.id for t in result.columns[column]],
                "big_frog": {"task_id": frog.task_id, "reason": frog.reason} if frog else None,
            }
        click.echo(json.dumps(payload, indent=2))
        return

    for column in BOARD_COLUMNS:
        items = result.columns[column]
        click.echo(f"### {column.label} ({len(items)})")
        frog_id = result.big_frog_id(column)
        for task in items:
            marker = "🐸" if task.id == frog_id else "•"
            click.echo(f"  {marker} [{task.priority.value:6}] {task.title} ({_describe_when(task, config.timezone)})")
        if frog_id:
            click.echo(f"  Big Frog: {result.big_frogs[column].reason}")
        click.echo()


@main.command("classify")
@click.argument("task_id")
def classify_task(task_id: str):
    """Show where a task belongs right now."""
    config = load_config()
    try:
        task = get_repository(config).get(config.user_id, task_id)
    except RepositoryError as e:
        _fail(e)

    current = _now(config)
    recommended = classify(task, current, config.timezone)
    click.echo(f"{task.title}")
    click.echo(f"  stored:      {task.column.label}")
    click.echo(f"  recommended: {recommended.label}")
    upcoming = next_occurrence(task, current, config.timezone)
    if upcoming:
        click.echo(f"  next:        {upcoming:%A %Y-%m-%d %H:%M}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Count overdue, today, this-week and urgent tasks."""
    config = load_config()
    try:
        tasks = get_repository(config).list(config.user_id)
    except RepositoryError as e:
        _fail(e)

    counts = monitor_stats(tasks, _now(config), config.timezone)
    if as_json:
        click.echo(json.dumps(counts.to_dict(), indent=2))
        return
    for key, value in counts.to_dict().items():
        click.echo(f"{key.replace('_', ' '):10} {value}")


@main.command()
@click.option("--apply", "apply_moves", is_flag=True, help="Write recommended columns back")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check(apply_moves: bool, as_json: bool):
    """Run one movement check."""
    config = load_config()
    try:
        repo = get_repository(config)
        monitor = MovementMonitor(repo, config.user_id, config.timezone, clock=lambda: _now(config))
        result = monitor.tick()
        if apply_moves:
            apply_transitions(repo, config.user_id, result.transitions)
    except RepositoryError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "transitions": [t.to_dict() for t in result.transitions],
                    "stats": result.stats.to_dict(),
                },
                indent=2,
            )
        )
        return

    if not result.transitions:
        click.echo("Board is up to date.")
        return
    for t in result.transitions:
        click.echo(f"[{t.severity.value:10}] {t.task_id}: {t.from_column.label} -> {t.to_column.label} ({t.reason})")
    if not apply_moves:
        click.echo("Run with --apply to move them.")


@main.command()
@click.option("--interval", type=int, default=None, help="Seconds between checks")
@click.option("--apply", "apply_moves", is_flag=True, help="Write recommended columns back")
def watch(interval: int | None, apply_moves: bool):
    """Keep checking for movements until interrupted."""
    config = load_config()
    logging.getLogger("frogboard").setLevel(logging.INFO)
    try:
        repo = get_repository(config)
    except RepositoryError as e:
        _fail(e)

    def report(transitions):
        for t in transitions:
            click.echo(f"[{t.severity.value}] {t.task_id}: {t.from_column.label} -> {t.to_column.label} ({t.reason})")
        if apply_moves:
            apply_transitions(repo, config.user_id, transitions)

    scheduler = BlockingScheduler(timezone=resolve_zone(config.timezone))
    monitor = MovementMonitor(
        repo,
        config.user_id,
        config.timezone,
        interval_seconds=interval or config.monitor_interval_seconds,
        on_transitions=report,
        scheduler=scheduler,
    )
    click.echo(f"Watching every {monitor.interval_seconds}s (Ctrl-C to stop)")
    try:
        monitor.start()
    except (KeyboardInterrupt, SystemExit):
        monitor.stop()
        if scheduler.running:
            scheduler.shutdown(wait=False)


@main.command()
@click.argument("title")
@click.option(
    "--priority",
    type=click.Choice([p.value for p in Priority]),
    default=Priority.MEDIUM.value,
    show_default=True,
)
@click.option(
    "--recurrence",
    type=click.Choice([r.value for r in Recurrence]),
    default=Recurrence.ONCE.value,
    show_default=True,
)
@click.option("--deadline", help="Deadline, 'YYYY-MM-DD HH:MM' local time")
@click.option("--on", "scheduled_on", help="Scheduled date, YYYY-MM-DD")
@click.option("--at", "scheduled_at", help="Scheduled time, 'YYYY-MM-DD HH:MM' local time")
@click.option("--day", "recurrence_day", help="Weekday for weekly tasks")
@click.option("--time", "recurrence_at", help="HH:MM for daily and weekly tasks")
@click.option("--duration", type=int, help="Estimated minutes")
def add(title, priority, recurrence, deadline, scheduled_on, scheduled_at, recurrence_day, recurrence_at, duration):
    """Add a task; its column is decided immediately."""
    config = load_config()
    current = _now(config)

    recurrence_time = None
    if recurrence_at:
        try:
            time_of_day = time.fromisoformat(recurrence_at)
        except ValueError:
            raise click.BadParameter(f"Expected HH:MM, got {recurrence_at!r}", param_hint="--time")
        recurrence_time = as_utc(at_time_of_day(current.date(), time_of_day, current.tzinfo))
    if recurrence == Recurrence.EVERYWEEK.value and parse_weekday(recurrence_day) is None:
        raise click.BadParameter("Weekly tasks need a weekday", param_hint="--day")
    if recurrence != Recurrence.ONCE.value and recurrence_time is None:
        raise click.BadParameter("Recurring tasks need a time", param_hint="--time")

    scheduled_time = _parse_local(scheduled_at, config.timezone)
    scheduled_date = None
    if scheduled_on:
        try:
            scheduled_date = datetime.fromisoformat(scheduled_on).date()
        except ValueError:
            raise click.BadParameter(f"Expected YYYY-MM-DD, got {scheduled_on!r}", param_hint="--on")
    elif scheduled_time:
        scheduled_date = to_zone(scheduled_time, config.timezone).date()

    task = Task(
        id="",
        title=title,
        priority=Priority(priority),
        recurrence=Recurrence(recurrence),
        deadline=_parse_local(deadline, config.timezone),
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
        recurrence_day=recurrence_day,
        recurrence_time=recurrence_time,
        duration=duration,
    )
    try:
        created = create_task(get_repository(config), config.user_id, task, current, config.timezone)
    except RepositoryError as e:
        _fail(e)
    click.echo(f"Added {created.id} to {created.column.label}")


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Mark a task completed."""
    config = load_config()
    try:
        task = complete_task(get_repository(config), config.user_id, task_id, _now(config))
    except RepositoryError as e:
        _fail(e)
    click.echo(f"Completed: {task.title}")


@main.command()
def reopen():
    """Put finished daily and weekly tasks back on the board when their slot comes round."""
    config = load_config()
    try:
        reopened = reopen_recurring(get_repository(config), config.user_id, _now(config), config.timezone)
    except RepositoryError as e:
        _fail(e)
    if not reopened:
        click.echo("Nothing to reopen.")
        return
    for task in reopened:
        click.echo(f"Reopened: {task.title} ({task.column.label})")


@main.command()
def timezones():
    """List common timezones."""
    config = load_config()
    for name, label in TIMEZONE_OPTIONS:
        marker = "*" if name == config.timezone else " "
        click.echo(f"{marker} {name:22} {label}")
