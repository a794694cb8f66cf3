"""Task repository interface."""

from typing import Protocol

from frogboard.core.tasks import Task


class TaskRepository(Protocol):
    """
    Interface for task storage.

    Temporal fields are stored as UTC instants or explicit civil dates,
    never as local timestamps.
    """

    def list(self, user_id: str) -> list[Task]:
        """All tasks for a user, in stored order."""
        ...

    def get(self, user_id: str, task_id: str) -> Task:
        """One task. Raises TaskNotFoundError if missing."""
        ...

    def create(self, user_id: str, task: Task) -> Task:
        """Store a new task and return it as stored."""
        ...

    def update(self, user_id: str, task_id: str, fields: dict) -> Task:
        """Apply storage-row fields to a task and return the updated task."""
        ...

    def delete(self, user_id: str, task_id: str) -> None:
        """Remove a task."""
        ...
