"""Shared workflow layer between the CLI and the movement monitor.

Everything that touches the repository lives here; the decisions themselves
come from the pure core.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path

from .adapters import FileTaskRepository, SupabaseTaskRepository, TaskNotFoundError
from .config import DATA_DIR, Config
from .core.big_frog import BigFrog, select_big_frogs
from .core.movement import MovementTransition
from .core.placement import classify, needs_reset
from .core.sorting import sort_column
from .core.tasks import BOARD_COLUMNS, Column, Status, Task, as_utc
from .core.timectx import in_zone
from .ports import TaskRepository

logger = logging.getLogger(__name__)

# Editing any of these re-runs classification
TEMPORAL_FIELDS = {
    "recurrence",
    "deadline",
    "scheduled_date",
    "scheduled_time",
    "recurrence_day",
    "recurrence_time",
}


@dataclass
class Board:
    """Classified, sorted columns plus their Big Frogs."""

    now: datetime
    columns: dict[Column, list[Task]] = field(default_factory=dict)
    big_frogs: dict[Column, BigFrog] = field(default_factory=dict)

    def big_frog_id(self, column: Column) -> str | None:
        frog = self.big_frogs.get(column)
        return frog.task_id if frog else None


def get_repository(config: Config) -> TaskRepository:
    """Supabase when configured, otherwise the local JSON store."""
    if config.uses_supabase:
        return SupabaseTaskRepository(config)
    if config.tasks_dir:
        return FileTaskRepository(Path(config.tasks_dir).expanduser())
    return FileTaskRepository(DATA_DIR / "tasks")


def build_board(tasks: list[Task], now: datetime, tz_name: str | None) -> Board:
    """Place every active task, sort each column and pick its Big Frog."""
    current = in_zone(now, tz_name)
    columns: dict[Column, list[Task]] = {column: [] for column in BOARD_COLUMNS}
    for task in tasks:
        if task.is_completed:
            continue
        columns[classify(task, current, tz_name)].append(task)

    columns = {column: sort_column(items, column, tz_name) for column, items in columns.items()}
    return Board(now=current, columns=columns, big_frogs=select_big_frogs(columns, tz_name))


def create_task(repo: TaskRepository, user_id: str, task: Task, now: datetime, tz_name: str | None) -> Task:
    """Store a new task with its initial column, at the end of that column's manual order."""
    column = classify(task, now, tz_name)
    existing = [t for t in repo.list(user_id) if t.column is column]
    order = max((t.order for t in existing), default=-1) + 1
    created = repo.create(user_id, replace(task, column=column, order=order))
    logger.info(f"Created task {created.id} in {column.label}")
    return created


def edit_task(
    repo: TaskRepository,
    user_id: str,
    task_id: str,
    fields: dict,
    now: datetime,
    tz_name: str | None,
) -> Task:
    """Apply storage-row fields, re-classifying when a temporal field changes."""
    fields = dict(fields)
    if TEMPORAL_FIELDS & fields.keys():
        current = repo.get(user_id, task_id)
        edited = Task.from_row({**current.to_row(), **fields})
        fields["task_column"] = classify(edited, now, tz_name).value
    return repo.update(user_id, task_id, fields)


def complete_task(repo: TaskRepository, user_id: str, task_id: str, now: datetime) -> Task:
    """Mark a task completed; it drops out of classification."""
    return repo.update(
        user_id,
        task_id,
        {"status": Status.COMPLETED.value, "completed_at": as_utc(now).isoformat()},
    )


def reopen_recurring(repo: TaskRepository, user_id: str, now: datetime, tz_name: str | None) -> list[Task]:
    """
    Reopen completed recurring tasks whose next slot has arrived.

    This is the storage side of the recurrence contract: the classifiers
    only judge today's slot, so a finished daily or weekly task has to be
    put back on the board here.
    """
    reopened = []
    for task in repo.list(user_id):
        if not needs_reset(task, now, tz_name):
            continue
        open_task = replace(task, status=Status.NOT_COMPLETE, completed_at=None)
        column = classify(open_task, now, tz_name)
        reopened.append(
            repo.update(
                user_id,
                task.id,
                {
                    "status": Status.NOT_COMPLETE.value,
                    "completed_at": None,
                    "task_column": column.value,
                },
            )
        )
        logger.info(f"Reopened recurring task {task.id} in {column.label}")
    return reopened


def apply_transitions(repo: TaskRepository, user_id: str, transitions: list[MovementTransition]) -> list[Task]:
    """Write recommended columns back to storage."""
    updated = []
    for transition in transitions:
        try:
            task = repo.update(user_id, transition.task_id, {"task_column": transition.to_column.value})
        except TaskNotFoundError:
            logger.warning(f"Task {transition.task_id} vanished before its move could be applied")
            continue
        logger.info(
            f"Moved {transition.task_id}: {transition.from_column.label} -> "
            f"{transition.to_column.label} ({transition.reason})"
        )
        updated.append(task)
    return updated
