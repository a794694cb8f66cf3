"""Big Frog selection - the one task per column to eat first."""

from dataclasses import dataclass
from datetime import datetime

from .tasks import Column, Priority, Task, as_utc
from .timectx import to_zone


@dataclass(frozen=True)
class BigFrog:
    """The selected task and why it won."""

    task_id: str
    column: Column
    reason: str


def select_big_frog(tasks: list[Task], column: Column, tz_name: str = "UTC") -> BigFrog | None:
    """
    Pick the Big Frog for a column.

    Candidates are the active high-priority tasks. Ties are broken by the
    largest duration, then the earliest scheduled time or deadline, then
    input order. The reason names the level that decided.
    """
    candidates = [t for t in tasks if not t.is_completed and t.priority is Priority.HIGH]
    if not candidates:
        return None
    if len(candidates) == 1:
        return BigFrog(candidates[0].id, column, "Only high priority task")

    longest = max(t.duration or 0 for t in candidates)
    by_duration = [t for t in candidates if (t.duration or 0) == longest]
    if len(by_duration) == 1:
        return BigFrog(
            by_duration[0].id,
            column,
            f"High priority task with the longest duration ({longest}min)",
        )

    timed = [(t, _timing(t, tz_name)) for t in by_duration]
    timed = [(t, when) for t, when in timed if when is not None]
    if timed:
        earliest = min((when for _, when in timed), key=as_utc)
        soonest = [t for t, when in timed if as_utc(when) == as_utc(earliest)]
        if len(soonest) == 1:
            winner = soonest[0]
            kind = "scheduled time" if winner.scheduled_time else "deadline"
            return BigFrog(
                winner.id,
                column,
                f"High priority task with the earliest {kind} ({earliest:%Y-%m-%d %H:%M})",
            )
        first = soonest[0]
    else:
        first = by_duration[0]

    return BigFrog(first.id, column, "High priority task, first of equally ranked tasks")


def select_big_frogs(columns: dict[Column, list[Task]], tz_name: str = "UTC") -> dict[Column, BigFrog]:
    """Big Frog for every column that has one."""
    frogs = {}
    for column, tasks in columns.items():
        frog = select_big_frog(tasks, column, tz_name)
        if frog:
            frogs[column] = frog
    return frogs


def is_big_frog(task: Task, tasks: list[Task], column: Column) -> bool:
    frog = select_big_frog(tasks, column)
    return frog is not None and frog.task_id == task.id


def _timing(task: Task, tz_name: str) -> datetime | None:
    if task.scheduled_time:
        return to_zone(task.scheduled_time, tz_name)
    if task.deadline:
        return to_zone(task.deadline, tz_name)
    return None
