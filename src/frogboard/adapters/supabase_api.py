"""Supabase adapter - PostgREST client for the tasks table."""

import logging

import requests

from frogboard.config import Config, load_config
from frogboard.core.tasks import Task

from .errors import AuthenticationError, RepositoryError, TaskNotFoundError

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
REQUEST_TIMEOUT = 15


class SupabaseTaskRepository:
    """
    Supabase tasks table over its REST API.

    Implements TaskRepository protocol. Row-level security on the table
    scopes every query to the key's user; the user_id filter is applied
    as well so service keys behave the same way. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        if not self.config.uses_supabase:
            raise AuthenticationError("SUPABASE_URL and SUPABASE_KEY must be set in frogboard.conf")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": self.config.supabase_key,
                "Authorization": f"Bearer {self.config.supabase_key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            }
        )

    @property
    def _endpoint(self) -> str:
        return f"{self.config.supabase_url}/rest/v1/{TASKS_TABLE}"

    def _request(self, method: str, params: dict, payload: dict | None = None):
        """Make an API request and return the decoded row list."""
        try:
            resp = self._session.request(
                method,
                self._endpoint,
                params=params,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise RepositoryError(f"Supabase request failed: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthenticationError(f"Supabase rejected credentials: {resp.text}")
        if resp.status_code >= 400:
            raise RepositoryError(f"Supabase {method} failed ({resp.status_code}): {resp.text}")
        if not resp.content:
            return []
        return resp.json()

    @staticmethod
    def _scope(user_id: str, task_id: str | None = None) -> dict:
        params = {"user_id": f"eq.{user_id}"}
        if task_id is not None:
            params["id"] = f"eq.{task_id}"
        return params

    def list(self, user_id: str) -> list[Task]:
        """All tasks for a user, by manual order then newest first."""
        params = {"select": "*", **self._scope(user_id), "order": "order_num.asc,created_at.desc"}
        rows = self._request("GET", params)
        logger.debug(f"Fetched {len(rows)} tasks for {user_id}")
        return [Task.from_row(row) for row in rows]

    def get(self, user_id: str, task_id: str) -> Task:
        rows = self._request("GET", {"select": "*", **self._scope(user_id, task_id)})
        if not rows:
            raise TaskNotFoundError(task_id)
        return Task.from_row(rows[0])

    def create(self, user_id: str, task: Task) -> Task:
        """Insert a task; the database assigns id and created_at when absent."""
        row = {k: v for k, v in task.to_row().items() if v is not None}
        if not row.get("id"):
            row.pop("id", None)
        row["user_id"] = user_id
        rows = self._request("POST", {}, row)
        if not rows:
            raise RepositoryError("Supabase insert returned no row")
        return Task.from_row(rows[0])

    def update(self, user_id: str, task_id: str, fields: dict) -> Task:
        rows = self._request("PATCH", self._scope(user_id, task_id), fields)
        if not rows:
            raise TaskNotFoundError(task_id)
        return Task.from_row(rows[0])

    def delete(self, user_id: str, task_id: str) -> None:
        rows = self._request("DELETE", self._scope(user_id, task_id))
        if not rows:
            raise TaskNotFoundError(task_id)
