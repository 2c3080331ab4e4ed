#  Agent Dashboard - Task Service
#
#  Read accessors for the tasks table, newest first.
#
#  Depends on: dashboard/db/connection.py, models/enums.py
#  Used by:    container.py, routes/tasks.py

from dashboard.db.connection import Database
from dashboard.models.enums import TaskStatus
from dashboard.services.rows import rows_to_dicts

DEFAULT_TASK_LIMIT = 50


class TaskService:
    def __init__(self, db: Database):
        self._db = db

    async def list_tasks(self, limit: int = DEFAULT_TASK_LIMIT) -> list[dict]:
        """Most recent tasks, up to `limit`."""
        rows = await self._db.fetchall(
            "SELECT * FROM tasks ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        return rows_to_dicts(rows)

    async def list_tasks_by_status(self, status: TaskStatus) -> list[dict]:
        """All tasks with the given status, newest first."""
        rows = await self._db.fetchall(
            "SELECT * FROM tasks WHERE status = ? ORDER BY created_at DESC, id DESC",
            (TaskStatus(status).value,),
        )
        return rows_to_dicts(rows)
