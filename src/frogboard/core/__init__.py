"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Column, Priority, Status, Recurrence, BOARD_COLUMNS
from .timectx import DEFAULT_TIMEZONE, TIMEZONE_OPTIONS, resolve_zone, to_zone, start_of_week, end_of_week
from .placement import classify, classify_once, classify_daily, classify_weekly, next_occurrence
from .sorting import sort_column
from .big_frog import BigFrog, select_big_frog, select_big_frogs
from .movement import MovementTransition, MonitorStats, Severity, monitor_tick, monitor_stats

__all__ = [
    # Tasks
    "Task",
    "Column",
    "Priority",
    "Status",
    "Recurrence",
    "BOARD_COLUMNS",
    # Time context
    "DEFAULT_TIMEZONE",
    "TIMEZONE_OPTIONS",
    "resolve_zone",
    "to_zone",
    "start_of_week",
    "end_of_week",
    # Placement
    "classify",
    "classify_once",
    "classify_daily",
    "classify_weekly",
    "next_occurrence",
    # Sorting
    "sort_column",
    # Big Frog
    "BigFrog",
    "select_big_frog",
    "select_big_frogs",
    # Movement
    "MovementTransition",
    "MonitorStats",
    "Severity",
    "monitor_tick",
    "monitor_stats",
]
