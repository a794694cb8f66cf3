"""File-based task storage adapter."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from frogboard.core.tasks import Task

from .errors import RepositoryError, TaskNotFoundError

logger = logging.getLogger(__name__)


class FileTaskRepository:
    """
    File-based task storage.

    Implements TaskRepository protocol. Each user gets a JSON file holding
    a list of storage rows.
    """

    def __init__(self, tasks_dir: Path | str):
        self.tasks_dir = Path(tasks_dir).expanduser()
        self.tasks_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_user(self, user_id: str) -> Path:
        """Get the file path for a user."""
        return self.tasks_dir / f"{user_id}.json"

    def _read_rows(self, user_id: str):
        path = self._path_for_user(user_id)
        if not path.exists():
            return []
        try:
            rows = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Corrupt task file {path}: {e}") from e
        if not isinstance(rows, list):
            raise RepositoryError(f"Corrupt task file {path}: expected a list")
        return rows

    def _write_rows(self, user_id: str, rows) -> None:
        path = self._path_for_user(user_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(rows, indent=2))
        tmp.replace(path)

    def _find(self, rows, task_id: str) -> int:
        for index, row in enumerate(rows):
            if str(row.get("id")) == task_id:
                return index
        raise TaskNotFoundError(task_id)

    def list(self, user_id: str) -> list[Task]:
        """All tasks for a user, in stored order."""
        return [Task.from_row(row) for row in self._read_rows(user_id)]

    def get(self, user_id: str, task_id: str) -> Task:
        rows = self._read_rows(user_id)
        return Task.from_row(rows[self._find(rows, task_id)])

    def create(self, user_id: str, task: Task) -> Task:
        """Store a new task, assigning an id and creation time if missing."""
        rows = self._read_rows(user_id)
        row = task.to_row()
        row["id"] = row["id"] or str(uuid.uuid4())
        row["created_at"] = row["created_at"] or datetime.now(timezone.utc).isoformat()
        rows.append(row)
        self._write_rows(user_id, rows)
        logger.debug(f"Created task {row['id']} for {user_id}")
        return Task.from_row(row)

    def update(self, user_id: str, task_id: str, fields: dict) -> Task:
        """Merge storage-row fields into a task."""
        rows = self._read_rows(user_id)
        index = self._find(rows, task_id)
        rows[index] = {**rows[index], **fields, "id": rows[index]["id"]}
        self._write_rows(user_id, rows)
        return Task.from_row(rows[index])

    def delete(self, user_id: str, task_id: str) -> None:
        rows = self._read_rows(user_id)
        del rows[self._find(rows, task_id)]
        self._write_rows(user_id, rows)
