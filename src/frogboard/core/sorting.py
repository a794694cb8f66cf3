"""Time-based ordering within a column.

Priority and manual order never take part in these sorts. Tasks without a
usable time keep their relative input order after the dated ones.
"""

from .placement import relevant_date, relevant_instant
from .tasks import Column, Task


def sort_for_today(tasks: list[Task], tz_name: str | None) -> list[Task]:
    """Earliest relevant instant first."""

    def sort_key(t: Task) -> tuple:
        instant = relevant_instant(t, tz_name)
        # sorted() is stable, so undated tasks all share one key
        return (0, instant.timestamp()) if instant else (1, 0.0)

    return sorted(tasks, key=sort_key)


def sort_by_date(tasks: list[Task], tz_name: str | None) -> list[Task]:
    """Earliest relevant date first."""

    def sort_key(t: Task) -> tuple:
        day = relevant_date(t, tz_name)
        return (0, day.toordinal()) if day else (1, 0)

    return sorted(tasks, key=sort_key)


def sort_column(tasks: list[Task], column: Column, tz_name: str | None) -> list[Task]:
    """Order a column's tasks using that column's rule."""
    if column is Column.TODAY:
        return sort_for_today(tasks, tz_name)
    return sort_by_date(tasks, tz_name)


def sort_by_order(tasks: list[Task]) -> list[Task]:
    """Manual (drag) order, independent of any time-based sort."""
    return sorted(tasks, key=lambda t: t.order)
