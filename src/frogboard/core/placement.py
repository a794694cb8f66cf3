"""Column placement - which column a task belongs in right now.

Every function here is pure: the current time is always passed in. Missing
or unusable temporal fields place a task in Overdue instead of raising.
"""

from datetime import date, datetime, timedelta

from .tasks import Column, Recurrence, Task
from .timectx import at_time_of_day, in_week, in_zone, is_before, local_midnight, same_day, to_zone

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_weekday(name: str | None) -> int | None:
    """
    Weekday index (Monday=0) for a day name.

    Case-insensitive; accepts full names and abbreviations of three or more
    letters ("Wed", "tues", "THURS").
    """
    if not name:
        return None
    needle = name.strip().lower().rstrip(".")
    if len(needle) < 3:
        return None
    for index, day in enumerate(WEEKDAYS):
        if day.startswith(needle):
            return index
    return None


def relevant_instant(task: Task, tz_name: str | None) -> datetime | None:
    """
    The instant a one-off task is judged by, as local civil time.

    Priority: scheduled time, then scheduled date at local midnight, then
    deadline.
    """
    if task.scheduled_time:
        return to_zone(task.scheduled_time, tz_name)
    if task.scheduled_date:
        return local_midnight(task.scheduled_date, tz_name)
    if task.deadline:
        return to_zone(task.deadline, tz_name)
    return None


def relevant_date(task: Task, tz_name: str | None) -> date | None:
    """The local date a task is sorted by outside the Today column."""
    if task.scheduled_date:
        return task.scheduled_date
    if task.scheduled_time:
        return to_zone(task.scheduled_time, tz_name).date()
    if task.deadline:
        return to_zone(task.deadline, tz_name).date()
    return None


def place_instant(instant: datetime, current: datetime) -> Column:
    """Column for a single local instant relative to the local current time."""
    if is_before(instant, current):
        return Column.OVERDUE
    if same_day(instant, current):
        return Column.TODAY
    if in_week(instant, current):
        return Column.THIS_WEEK
    return Column.UPCOMING


def classify_once(task: Task, now: datetime, tz_name: str | None) -> Column:
    """Place a one-off task by its scheduled time, scheduled date or deadline."""
    assert task.recurrence is Recurrence.ONCE, f"not a one-off task: {task.id}"
    instant = relevant_instant(task, tz_name)
    if instant is None:
        return Column.OVERDUE
    return place_instant(instant, in_zone(now, tz_name))


def classify_daily(task: Task, now: datetime, tz_name: str | None) -> Column:
    """Today while today's slot is still ahead, Overdue once the clock passes it."""
    assert task.recurrence is Recurrence.EVERYDAY, f"not a daily task: {task.id}"
    if not task.recurrence_time:
        return Column.OVERDUE
    current = in_zone(now, tz_name)
    slot = _slot_on(current.date(), task, current, tz_name)
    return Column.TODAY if is_before(current, slot) else Column.OVERDUE


def classify_weekly(task: Task, now: datetime, tz_name: str | None) -> Column:
    """
    Place a weekly task relative to its next slot.

    Same day: Today until the slot time, then Overdue. Later in the current
    Monday-Sunday week: This Week. Anything past Sunday: Upcoming.
    """
    assert task.recurrence is Recurrence.EVERYWEEK, f"not a weekly task: {task.id}"
    if not task.recurrence_time or not task.recurrence_day:
        return Column.OVERDUE
    target = parse_weekday(task.recurrence_day)
    if target is None:
        return Column.OVERDUE

    current = in_zone(now, tz_name)
    days_until = (target - current.weekday()) % 7
    occurrence = _slot_on(current.date() + timedelta(days=days_until), task, current, tz_name)

    if days_until == 0:
        return Column.TODAY if is_before(current, occurrence) else Column.OVERDUE
    if in_week(occurrence, current):
        return Column.THIS_WEEK
    return Column.UPCOMING


_CLASSIFIERS = {
    Recurrence.ONCE: classify_once,
    Recurrence.EVERYDAY: classify_daily,
    Recurrence.EVERYWEEK: classify_weekly,
}


def classify(task: Task, now: datetime, tz_name: str | None) -> Column:
    """Recommended column for a task at `now` in the user's zone."""
    return _CLASSIFIERS[task.recurrence](task, now, tz_name)


def next_occurrence(task: Task, now: datetime, tz_name: str | None) -> datetime | None:
    """
    Next local datetime a task is due.

    For recurring tasks this is today's slot while it is still open, else the
    following slot. One-off tasks return their relevant instant.
    """
    if task.recurrence is Recurrence.ONCE:
        return relevant_instant(task, tz_name)
    if not task.recurrence_time:
        return None

    current = in_zone(now, tz_name)
    if task.recurrence is Recurrence.EVERYDAY:
        slot = _slot_on(current.date(), task, current, tz_name)
        return slot if is_before(current, slot) else _slot_on(current.date() + timedelta(days=1), task, current, tz_name)

    target = parse_weekday(task.recurrence_day)
    if target is None:
        return None
    days_until = (target - current.weekday()) % 7
    slot = _slot_on(current.date() + timedelta(days=days_until), task, current, tz_name)
    if not is_before(current, slot):
        slot = _slot_on(current.date() + timedelta(days=days_until + 7), task, current, tz_name)
    return slot


def needs_reset(task: Task, now: datetime, tz_name: str | None) -> bool:
    """
    True when a completed recurring task should be reopened.

    A daily task reopens on the first local day after it was completed; a
    weekly task reopens once its weekday has come round again. Completions
    without a timestamp are left alone.
    """
    if not task.is_completed or not task.is_recurring or not task.completed_at:
        return False
    current = in_zone(now, tz_name)
    if task.recurrence is Recurrence.EVERYDAY:
        last_slot_day = current.date()
    else:
        target = parse_weekday(task.recurrence_day)
        if target is None:
            return False
        last_slot_day = current.date() - timedelta(days=(current.weekday() - target) % 7)
    return to_zone(task.completed_at, tz_name).date() < last_slot_day


def _slot_on(day: date, task: Task, current: datetime, tz_name: str | None) -> datetime:
    time_of_day = to_zone(task.recurrence_time, tz_name).time()
    return at_time_of_day(day, time_of_day, current.tzinfo)
