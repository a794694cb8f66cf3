"""Adapters - I/O implementations of ports."""

from .errors import AuthenticationError, RepositoryError, TaskNotFoundError
from .file_tasks import FileTaskRepository
from .supabase_api import SupabaseTaskRepository

__all__ = [
    "AuthenticationError",
    "RepositoryError",
    "TaskNotFoundError",
    "FileTaskRepository",
    "SupabaseTaskRepository",
]
