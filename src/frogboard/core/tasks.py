"""Pure task domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Status(Enum):
    NOT_COMPLETE = "not_complete"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Recurrence(Enum):
    ONCE = "once"
    EVERYDAY = "everyday"
    EVERYWEEK = "everyweek"


class Column(Enum):
    """Board column. Values are the stored column names."""

    TODAY = "Today"
    THIS_WEEK = "This Week"
    UPCOMING = "Upcoming task"
    OVERDUE = "Overdue"

    @property
    def label(self) -> str:
        """Display label."""
        if self is Column.UPCOMING:
            return "Upcoming"
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Column":
        """Accept a stored value, a display label or an enum name."""
        needle = value.strip().lower()
        for column in cls:
            if needle in (column.value.lower(), column.label.lower(), column.name.lower()):
                return column
        raise ValueError(f"Unknown column: {value!r}")


# Display order on the board
BOARD_COLUMNS = [Column.OVERDUE, Column.TODAY, Column.THIS_WEEK, Column.UPCOMING]


@dataclass
class Task:
    """A board task and the temporal fields the classifier reads."""

    id: str
    title: str
    priority: Priority = Priority.MEDIUM
    status: Status = Status.NOT_COMPLETE
    recurrence: Recurrence = Recurrence.ONCE
    deadline: datetime | None = None
    scheduled_date: date | None = None
    scheduled_time: datetime | None = None
    recurrence_day: str | None = None
    recurrence_time: datetime | None = None
    duration: int | None = None
    column: Column = Column.UPCOMING
    order: int = 0
    description: str = ""
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status is Status.COMPLETED

    @property
    def is_recurring(self) -> bool:
        return self.recurrence in (Recurrence.EVERYDAY, Recurrence.EVERYWEEK)

    @classmethod
    def from_row(cls, row: dict) -> "Task":
        """
        Create Task from a storage row.

        Malformed temporal values and unknown enum values are treated as
        absent rather than rejected.
        """
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            priority=_parse_enum(Priority, row.get("priority"), Priority.MEDIUM),
            status=_parse_enum(Status, row.get("status"), Status.NOT_COMPLETE),
            recurrence=_parse_enum(Recurrence, row.get("recurrence"), Recurrence.ONCE),
            deadline=parse_instant(row.get("deadline")),
            scheduled_date=parse_date(row.get("scheduled_date")),
            scheduled_time=parse_instant(row.get("scheduled_time")),
            recurrence_day=row.get("recurrence_day") or None,
            recurrence_time=parse_instant(row.get("recurrence_time")),
            duration=_parse_int(row.get("duration")),
            column=_parse_column(row.get("task_column")),
            order=_parse_int(row.get("order_num")) or 0,
            description=row.get("description") or "",
            created_at=parse_instant(row.get("created_at")),
            completed_at=parse_instant(row.get("completed_at")),
        )

    def to_row(self) -> dict:
        """Serialize to a storage row."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "recurrence": self.recurrence.value,
            "deadline": _format_instant(self.deadline),
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "scheduled_time": _format_instant(self.scheduled_time),
            "recurrence_day": self.recurrence_day,
            "recurrence_time": _format_instant(self.recurrence_time),
            "duration": self.duration,
            "task_column": self.column.value,
            "order_num": self.order,
            "created_at": _format_instant(self.created_at),
            "completed_at": _format_instant(self.completed_at),
        }


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value) -> datetime | None:
    """Parse a stored instant. Returns None for missing or malformed values."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str):
        logger.debug(f"Ignoring non-string instant: {value!r}")
        return None
    text = value.strip()
    # Postgres and JS both emit a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        logger.debug(f"Ignoring malformed instant: {value!r}")
        return None


def parse_date(value) -> date | None:
    """Parse a stored civil date. Accepts a bare date or the date part of a timestamp."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        logger.debug(f"Ignoring non-string date: {value!r}")
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug(f"Ignoring malformed date: {value!r}")
        return None


def _format_instant(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat()


def _parse_enum(enum_cls, value, default):
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug(f"Unknown {enum_cls.__name__} value {value!r}, using {default.value}")
        return default


def _parse_column(value) -> Column:
    if not value:
        return Column.UPCOMING
    try:
        return Column.parse(value)
    except ValueError:
        logger.debug(f"Unknown column {value!r}, using {Column.UPCOMING.value}")
        return Column.UPCOMING


def _parse_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed integer: {value!r}")
        return None
