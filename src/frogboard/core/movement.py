"""Movement detection - drift between stored and recommended columns.

Pure function of (tasks, now, timezone). Nothing here writes back; the
caller decides whether to apply a transition.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .placement import classify
from .tasks import Column, Recurrence, Task
from .timectx import in_zone


class Severity(Enum):
    IMMEDIATE = "immediate"  # just became Today or Overdue
    SCHEDULED = "scheduled"  # a recurring slot lapsed
    BACKGROUND = "background"  # drifted into This Week or Upcoming


@dataclass(frozen=True)
class MovementTransition:
    task_id: str
    from_column: Column
    to_column: Column
    reason: str
    severity: Severity
    trigger_time: datetime

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "from_column": self.from_column.value,
            "to_column": self.to_column.value,
            "reason": self.reason,
            "severity": self.severity.value,
            "trigger_time": self.trigger_time.isoformat(),
        }


@dataclass(frozen=True)
class MonitorStats:
    total: int
    overdue: int
    today: int
    this_week: int
    urgent: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "overdue": self.overdue,
            "today": self.today,
            "this_week": self.this_week,
            "urgent": self.urgent,
        }


_REASONS = {
    (Column.TODAY, Column.OVERDUE): "Task is now overdue",
    (Column.THIS_WEEK, Column.TODAY): "Task is due today",
    (Column.THIS_WEEK, Column.OVERDUE): "Task is now overdue",
    (Column.UPCOMING, Column.THIS_WEEK): "Task is now in this week",
    (Column.UPCOMING, Column.TODAY): "Task is due today",
    (Column.UPCOMING, Column.OVERDUE): "Task is now overdue",
    (Column.OVERDUE, Column.TODAY): "Task deadline updated to today",
    (Column.OVERDUE, Column.THIS_WEEK): "Task deadline updated to this week",
    (Column.OVERDUE, Column.UPCOMING): "Task deadline updated to upcoming",
}


def movement_reason(task: Task, from_column: Column, to_column: Column) -> str:
    """Human-readable reason for a move."""
    if task.is_recurring and to_column is Column.OVERDUE:
        kind = "Daily" if task.recurrence is Recurrence.EVERYDAY else "Weekly"
        return f"{kind} task time has passed"
    return _REASONS.get(
        (from_column, to_column),
        f"Moved from {from_column.label} to {to_column.label}",
    )


def movement_severity(task: Task, to_column: Column) -> Severity:
    if task.is_recurring and to_column is Column.OVERDUE:
        return Severity.SCHEDULED
    if to_column in (Column.TODAY, Column.OVERDUE):
        return Severity.IMMEDIATE
    return Severity.BACKGROUND


def active_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if not t.is_completed]


def monitor_tick(tasks: list[Task], now: datetime, tz_name: str | None) -> list[MovementTransition]:
    """
    Transitions for every active task whose stored column disagrees with
    its recommended column. Empty when the board is already up to date.
    """
    trigger_time = in_zone(now, tz_name)
    transitions = []
    for task in active_tasks(tasks):
        recommended = classify(task, trigger_time, tz_name)
        if recommended is task.column:
            continue
        transitions.append(
            MovementTransition(
                task_id=task.id,
                from_column=task.column,
                to_column=recommended,
                reason=movement_reason(task, task.column, recommended),
                severity=movement_severity(task, recommended),
                trigger_time=trigger_time,
            )
        )
    return transitions


def tasks_in(tasks: list[Task], column: Column, now: datetime, tz_name: str | None) -> list[Task]:
    """Active tasks the classifier currently places in a column."""
    return [t for t in active_tasks(tasks) if classify(t, now, tz_name) is column]


def overdue_tasks(tasks: list[Task], now: datetime, tz_name: str | None) -> list[Task]:
    return tasks_in(tasks, Column.OVERDUE, now, tz_name)


def today_tasks(tasks: list[Task], now: datetime, tz_name: str | None) -> list[Task]:
    return tasks_in(tasks, Column.TODAY, now, tz_name)


def this_week_tasks(tasks: list[Task], now: datetime, tz_name: str | None) -> list[Task]:
    return tasks_in(tasks, Column.THIS_WEEK, now, tz_name)


def urgent_tasks(tasks: list[Task], now: datetime, tz_name: str | None) -> list[Task]:
    """Overdue or due today."""
    urgent = (Column.OVERDUE, Column.TODAY)
    return [t for t in active_tasks(tasks) if classify(t, now, tz_name) in urgent]


def monitor_stats(tasks: list[Task], now: datetime, tz_name: str | None) -> MonitorStats:
    """Column counts derived from the classifier's current output."""
    active = active_tasks(tasks)
    placed = [classify(t, now, tz_name) for t in active]
    overdue = placed.count(Column.OVERDUE)
    today = placed.count(Column.TODAY)
    return MonitorStats(
        total=len(active),
        overdue=overdue,
        today=today,
        this_week=placed.count(Column.THIS_WEEK),
        urgent=overdue + today,
    )
