import logging
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

import psycopg2

from src.todo_api.db import Database
from src.todo_api.errors import InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TASK_COLUMNS = "id, text, completed, created_at"

# One fixed statement per combination of supplied fields. Parameters are the
# supplied values in column order, followed by the task id.
_UPDATE_STATEMENTS: Dict[FrozenSet[str], str] = {
    frozenset({"text"}): f"UPDATE tasks SET text=%s WHERE id=%s RETURNING {TASK_COLUMNS}",
    frozenset({"completed"}): f"UPDATE tasks SET completed=%s WHERE id=%s RETURNING {TASK_COLUMNS}",
    frozenset({"text", "completed"}): (
        f"UPDATE tasks SET text=%s, completed=%s WHERE id=%s RETURNING {TASK_COLUMNS}"
    ),
}
_UPDATE_COLUMN_ORDER = ("text", "completed")


def _clean_text(text: Optional[str]) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Task text is required")
    return cleaned


# PUBLIC_INTERFACE
def build_update(
    task_id: int, text: Optional[str] = None, completed: Optional[bool] = None
) -> Optional[Tuple[str, List[Any]]]:
    """
    Pick the update statement for the supplied fields.

    Returns (query, params), or None when neither field was supplied.
    Supplied text is trimmed and must not be empty.
    """
    values: Dict[str, Any] = {}
    if text is not None:
        values["text"] = _clean_text(text)
    if completed is not None:
        values["completed"] = bool(completed)
    if not values:
        return None

    query = _UPDATE_STATEMENTS[frozenset(values)]
    params = [values[col] for col in _UPDATE_COLUMN_ORDER if col in values]
    params.append(task_id)
    return query, params


class TaskRepository:
    """CRUD over the shared `tasks` table. Every call is a single statement."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def _run(self, what: str, fn, query: str, params: Optional[Sequence[Any]] = None):
        try:
            return fn(query, params)
        except psycopg2.Error:
            logger.exception("Error %s", what)
            raise InternalError()

    # PUBLIC_INTERFACE
    def list(self) -> List[Dict[str, Any]]:
        """All tasks, newest first."""
        return self._run(
            "fetching tasks",
            self.db.fetch_all,
            f"SELECT {TASK_COLUMNS} FROM tasks ORDER BY created_at DESC",
        )

    # PUBLIC_INTERFACE
    def create(self, text: Optional[str]) -> Dict[str, Any]:
        """Insert a task with trimmed text and completed=false."""
        cleaned = _clean_text(text)
        return self._run(
            "creating task",
            self.db.execute_returning_one,
            f"INSERT INTO tasks (text, completed) VALUES (%s, FALSE) RETURNING {TASK_COLUMNS}",
            [cleaned],
        )

    # PUBLIC_INTERFACE
    def update(self, task_id: int, text: Optional[str] = None, completed: Optional[bool] = None) -> Dict[str, Any]:
        """Update only the supplied fields. An empty update returns the row unchanged."""
        statement = build_update(task_id, text=text, completed=completed)
        if statement is None:
            row = self._run(
                "fetching task",
                self.db.fetch_one,
                f"SELECT {TASK_COLUMNS} FROM tasks WHERE id=%s",
                [task_id],
            )
        else:
            query, params = statement
            row = self._run("updating task", self.db.execute_returning, query, params)
        if row is None:
            raise NotFoundError("Task not found")
        return row

    # PUBLIC_INTERFACE
    def delete(self, task_id: int) -> Dict[str, Any]:
        """Delete a task and return its prior contents."""
        row = self._run(
            "deleting task",
            self.db.execute_returning,
            f"DELETE FROM tasks WHERE id=%s RETURNING {TASK_COLUMNS}",
            [task_id],
        )
        if row is None:
            raise NotFoundError("Task not found")
        return row
