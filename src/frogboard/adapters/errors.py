"""Errors raised by storage adapters."""


class RepositoryError(Exception):
    """Raised when the task store cannot be read or written."""

    pass


class AuthenticationError(RepositoryError):
    """Raised when the task store rejects our credentials."""

    pass


class TaskNotFoundError(RepositoryError):
    """Raised when a task id does not exist for the user."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id
