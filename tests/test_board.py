"""Tests for the shared workflow layer."""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest

from frogboard.adapters import FileTaskRepository, TaskNotFoundError
from frogboard.board import (
    apply_transitions,
    build_board,
    complete_task,
    create_task,
    edit_task,
    get_repository,
    reopen_recurring,
)
from frogboard.config import DATA_DIR, Config
from frogboard.core.movement import MovementTransition, Severity, monitor_tick
from frogboard.core.tasks import BOARD_COLUMNS, Column, Priority, Recurrence, Status, Task

TZ = "America/New_York"
NY = ZoneInfo(TZ)


def local(*args) -> datetime:
    return datetime(*args, tzinfo=NY)


def stored(*args) -> datetime:
    return local(*args).astimezone(timezone.utc)


@pytest.fixture
def repo(tmp_path):
    return FileTaskRepository(tmp_path)


@pytest.fixture
def now():
    # Wednesday
    return local(2025, 1, 15, 12, 0)


class TestGetRepository:
    def test_uses_configured_dir(self, tmp_path):
        repo = get_repository(Config(tasks_dir=str(tmp_path)))
        assert isinstance(repo, FileTaskRepository)
        assert repo.tasks_dir == tmp_path

    def test_falls_back_to_default(self):
        with patch("frogboard.board.FileTaskRepository") as mock_cls:
            get_repository(Config())
        mock_cls.assert_called_once_with(DATA_DIR / "tasks")

    def test_supabase_when_configured(self):
        config = Config(supabase_url="https://example.supabase.co", supabase_key="k")
        with patch("frogboard.board.SupabaseTaskRepository") as mock_cls:
            get_repository(config)
        mock_cls.assert_called_once_with(config)

    def test_expands_user_path(self):
        with patch("frogboard.board.FileTaskRepository") as mock_cls:
            get_repository(Config(tasks_dir="~/tasks"))
        assert mock_cls.call_args.args[0] == Path.home() / "tasks"


class TestBuildBoard:
    def test_places_and_sorts(self, now):
        tasks = [
            Task(id="evening", title="", deadline=stored(2025, 1, 15, 20, 0)),
            Task(id="late", title="", deadline=stored(2025, 1, 14, 9, 0)),
            Task(id="afternoon", title="", scheduled_time=stored(2025, 1, 15, 15, 0)),
            Task(id="friday", title="", deadline=stored(2025, 1, 17, 9, 0)),
            Task(id="next-month", title="", deadline=stored(2025, 2, 10, 9, 0)),
            Task(id="done", title="", deadline=stored(2025, 1, 15, 13, 0), status=Status.COMPLETED),
        ]
        board = build_board(tasks, now, TZ)

        assert list(board.columns) == BOARD_COLUMNS
        assert [t.id for t in board.columns[Column.TODAY]] == ["afternoon", "evening"]
        assert [t.id for t in board.columns[Column.OVERDUE]] == ["late"]
        assert [t.id for t in board.columns[Column.THIS_WEEK]] == ["friday"]
        assert [t.id for t in board.columns[Column.UPCOMING]] == ["next-month"]

    def test_ignores_stored_column(self, now):
        task = Task(id="t", title="", deadline=stored(2025, 1, 15, 20, 0), column=Column.UPCOMING)
        assert build_board([task], now, TZ).columns[Column.TODAY] == [task]

    def test_big_frog_per_column(self, now):
        tasks = [
            Task(id="small", title="", priority=Priority.HIGH, duration=15, deadline=stored(2025, 1, 15, 18, 0)),
            Task(id="big", title="", priority=Priority.HIGH, duration=120, deadline=stored(2025, 1, 15, 19, 0)),
        ]
        board = build_board(tasks, now, TZ)
        assert board.big_frog_id(Column.TODAY) == "big"
        assert board.big_frog_id(Column.UPCOMING) is None

    def test_now_in_user_zone(self):
        board = build_board([], datetime(2025, 1, 15, 17, 0, tzinfo=timezone.utc), TZ)
        assert board.now.hour == 12


class TestCreateTask:
    def test_sets_initial_column(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="Call", deadline=stored(2025, 1, 15, 16, 0)), now, TZ)
        assert task.column is Column.TODAY
        assert repo.get("u1", task.id).column is Column.TODAY

    def test_appends_to_column_order(self, repo, now):
        first = create_task(repo, "u1", Task(id="", title="a", deadline=stored(2025, 1, 15, 16, 0)), now, TZ)
        other = create_task(repo, "u1", Task(id="", title="b", deadline=stored(2025, 3, 1, 9, 0)), now, TZ)
        second = create_task(repo, "u1", Task(id="", title="c", deadline=stored(2025, 1, 15, 17, 0)), now, TZ)
        assert first.order == 0
        assert other.order == 0
        assert second.order == 1


class TestEditTask:
    def test_reclassifies_on_temporal_change(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="", deadline=stored(2025, 3, 1, 9, 0)), now, TZ)
        assert task.column is Column.UPCOMING

        edited = edit_task(repo, "u1", task.id, {"deadline": stored(2025, 1, 15, 18, 0).isoformat()}, now, TZ)
        assert edited.column is Column.TODAY

    def test_leaves_column_for_other_fields(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="old", deadline=stored(2025, 3, 1, 9, 0)), now, TZ)
        edited = edit_task(repo, "u1", task.id, {"title": "new"}, now, TZ)
        assert edited.title == "new"
        assert edited.column is Column.UPCOMING

    def test_missing_task(self, repo, now):
        with pytest.raises(TaskNotFoundError):
            edit_task(repo, "u1", "nope", {"deadline": None}, now, TZ)


class TestCompleteTask:
    def test_marks_completed(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="", deadline=stored(2025, 1, 15, 18, 0)), now, TZ)
        done = complete_task(repo, "u1", task.id, now)
        assert done.is_completed
        assert done.completed_at == now.astimezone(timezone.utc)
        assert build_board(repo.list("u1"), now, TZ).columns[Column.TODAY] == []


class TestReopenRecurring:
    @pytest.fixture
    def daily(self, repo, now):
        task = Task(
            id="",
            title="Stand-up",
            recurrence=Recurrence.EVERYDAY,
            recurrence_time=stored(2025, 1, 1, 9, 0),
        )
        return create_task(repo, "u1", task, now, TZ)

    def test_same_day_stays_completed(self, repo, daily, now):
        complete_task(repo, "u1", daily.id, local(2025, 1, 15, 9, 5))
        assert reopen_recurring(repo, "u1", now, TZ) == []

    def test_next_day_reopens(self, repo, daily):
        complete_task(repo, "u1", daily.id, local(2025, 1, 15, 9, 5))
        [task] = reopen_recurring(repo, "u1", local(2025, 1, 16, 7, 0), TZ)

        assert task.status is Status.NOT_COMPLETE
        assert task.completed_at is None
        assert task.column is Column.TODAY

    def test_weekly_waits_for_its_weekday(self, repo, now):
        weekly = create_task(
            repo,
            "u1",
            Task(
                id="",
                title="Review",
                recurrence=Recurrence.EVERYWEEK,
                recurrence_day="monday",
                recurrence_time=stored(2025, 1, 1, 10, 0),
            ),
            now,
            TZ,
        )
        complete_task(repo, "u1", weekly.id, local(2025, 1, 13, 10, 30))

        assert reopen_recurring(repo, "u1", local(2025, 1, 19, 23, 0), TZ) == []
        [task] = reopen_recurring(repo, "u1", local(2025, 1, 20, 8, 0), TZ)
        assert task.column is Column.TODAY

    def test_once_tasks_never_reopen(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="", deadline=stored(2025, 1, 14, 9, 0)), now, TZ)
        complete_task(repo, "u1", task.id, local(2025, 1, 14, 8, 0))
        assert reopen_recurring(repo, "u1", now, TZ) == []


class TestApplyTransitions:
    def test_writes_recommended_columns(self, repo, now):
        task = create_task(repo, "u1", Task(id="", title="", deadline=stored(2025, 1, 15, 18, 0)), now, TZ)
        evening = local(2025, 1, 15, 19, 0)

        transitions = monitor_tick(repo.list("u1"), evening, TZ)
        [updated] = apply_transitions(repo, "u1", transitions)

        assert updated.id == task.id
        assert updated.column is Column.OVERDUE
        assert monitor_tick(repo.list("u1"), evening, TZ) == []

    def test_skips_vanished_tasks(self, now):
        repo = MagicMock()
        repo.update.side_effect = TaskNotFoundError("gone")
        transition = MovementTransition(
            task_id="gone",
            from_column=Column.TODAY,
            to_column=Column.OVERDUE,
            reason="Task is now overdue",
            severity=Severity.IMMEDIATE,
            trigger_time=now,
        )
        assert apply_transitions(repo, "u1", [transition]) == []
