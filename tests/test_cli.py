"""Tests for the command line interface."""

import json
from datetime import datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from click.testing import CliRunner

from frogboard.adapters import FileTaskRepository
from frogboard.cli import main
from frogboard.config import Config
from frogboard.core.tasks import Column, Priority, Status, Task

TZ = "America/New_York"


def stored(*args) -> datetime:
    return datetime(*args, tzinfo=ZoneInfo(TZ)).astimezone(timezone.utc)


@pytest.fixture
def config(tmp_path):
    return Config(timezone=TZ, user_id="u1", tasks_dir=str(tmp_path))


@pytest.fixture
def repo(config):
    return FileTaskRepository(config.tasks_dir)


@pytest.fixture
def runner(config):
    # Wednesday noon in New York
    noon = datetime(2025, 1, 15, 12, 0, tzinfo=ZoneInfo(TZ))
    with patch("frogboard.cli.load_config", return_value=config), patch("frogboard.cli._now", return_value=noon):
        yield CliRunner()


class TestBoard:
    def test_json(self, runner, repo):
        repo.create("u1", Task(id="a", title="Call", priority=Priority.HIGH, deadline=stored(2025, 1, 15, 16, 0)))
        repo.create("u1", Task(id="b", title="Plan", deadline=stored(2025, 1, 17, 9, 0)))

        result = runner.invoke(main, ["board", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["Today"]["tasks"] == ["a"]
        assert data["Today"]["big_frog"] == {"task_id": "a", "reason": "Only high priority task"}
        assert data["This Week"]["tasks"] == ["b"]
        assert data["Upcoming task"] == {"tasks": [], "big_frog": None}

    def test_text(self, runner, repo):
        repo.create("u1", Task(id="a", title="Call", priority=Priority.HIGH, deadline=stored(2025, 1, 15, 16, 0)))

        result = runner.invoke(main, ["board"])

        assert result.exit_code == 0
        assert "### Today (1)" in result.output
        assert "🐸" in result.output
        assert "due 2025-01-15 16:00" in result.output
        assert "Big Frog: Only high priority task" in result.output

    def test_storage_error(self, runner, repo):
        (repo.tasks_dir / "u1.json").write_text("{oops")

        result = runner.invoke(main, ["board"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestAdd:
    def test_once_task(self, runner, repo):
        result = runner.invoke(main, ["add", "Call", "--deadline", "2025-01-15 16:00", "--priority", "high"])

        assert result.exit_code == 0
        assert "to Today" in result.output
        [task] = repo.list("u1")
        assert task.deadline == stored(2025, 1, 15, 16, 0)
        assert task.column is Column.TODAY

    def test_daily_task_after_its_time(self, runner, repo):
        result = runner.invoke(main, ["add", "Stand-up", "--recurrence", "everyday", "--time", "09:00"])

        assert result.exit_code == 0
        assert "to Overdue" in result.output
        assert repo.list("u1")[0].recurrence_time == stored(2025, 1, 15, 9, 0)

    def test_weekly_needs_day(self, runner):
        result = runner.invoke(main, ["add", "Review", "--recurrence", "everyweek", "--time", "10:00"])
        assert result.exit_code == 2
        assert "weekday" in result.output

    def test_recurring_needs_time(self, runner):
        result = runner.invoke(main, ["add", "Stand-up", "--recurrence", "everyday"])
        assert result.exit_code == 2

    def test_bad_deadline(self, runner):
        result = runner.invoke(main, ["add", "Call", "--deadline", "tomorrow"])
        assert result.exit_code == 2


class TestCheck:
    @pytest.fixture
    def stale(self, repo):
        return repo.create(
            "u1",
            Task(id="s", title="", deadline=stored(2025, 1, 15, 16, 0), column=Column.UPCOMING),
        )

    def test_reports_without_writing(self, runner, repo, stale):
        result = runner.invoke(main, ["check"])

        assert result.exit_code == 0
        assert "s: Upcoming -> Today (Task is due today)" in result.output
        assert "--apply" in result.output
        assert repo.get("u1", "s").column is Column.UPCOMING

    def test_apply(self, runner, repo, stale):
        runner.invoke(main, ["check", "--apply"])
        assert repo.get("u1", "s").column is Column.TODAY
        assert "Board is up to date." in runner.invoke(main, ["check"]).output

    def test_json(self, runner, stale):
        data = json.loads(runner.invoke(main, ["check", "--json"]).output)
        assert data["transitions"][0]["to_column"] == "Today"
        assert data["stats"]["today"] == 1


class TestOtherCommands:
    def test_stats_json(self, runner, repo):
        repo.create("u1", Task(id="o", title="", deadline=stored(2025, 1, 14, 9, 0)))
        data = json.loads(runner.invoke(main, ["stats", "--json"]).output)
        assert data == {"total": 1, "overdue": 1, "today": 0, "this_week": 0, "urgent": 1}

    def test_classify(self, runner, repo):
        repo.create("u1", Task(id="t", title="Call", deadline=stored(2025, 1, 15, 16, 0)))
        result = runner.invoke(main, ["classify", "t"])
        assert "stored:      Upcoming" in result.output
        assert "recommended: Today" in result.output

    def test_classify_unknown_task(self, runner):
        result = runner.invoke(main, ["classify", "nope"])
        assert result.exit_code == 1
        assert "Task not found: nope" in result.output

    def test_done(self, runner, repo):
        repo.create("u1", Task(id="t", title="Call"))
        result = runner.invoke(main, ["done", "t"])
        assert "Completed: Call" in result.output
        assert repo.get("u1", "t").status is Status.COMPLETED

    def test_reopen_nothing(self, runner):
        assert "Nothing to reopen." in runner.invoke(main, ["reopen"]).output

    def test_timezones_marks_current(self, runner):
        result = runner.invoke(main, ["timezones"])
        assert "* America/New_York" in result.output
