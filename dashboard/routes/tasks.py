#  Agent Dashboard - Task Routes
#
#  Task listing (recent or by status) and the task summary.
#
#  Depends on: container.py, models/schemas.py, services/stats.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Query

from dashboard.config import TASK_STATS_ROW_CAP
from dashboard.container import Container
from dashboard.exceptions import internal_errors
from dashboard.models.enums import TaskStatus
from dashboard.models.schemas import TaskOut, TaskStats
from dashboard.services.stats import summarize_tasks
from dashboard.services.tasks import DEFAULT_TASK_LIMIT, TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("")
@inject
async def list_tasks(
    limit: int = Query(default=DEFAULT_TASK_LIMIT, ge=1, le=1000),
    status: TaskStatus | None = None,
    tasks: TaskService = Depends(Provide[Container.tasks]),
) -> list[TaskOut]:
    """Recent tasks, newest first. A status filter returns every match."""
    with internal_errors("Failed to fetch tasks"):
        if status:
            rows = await tasks.list_tasks_by_status(status)
        else:
            rows = await tasks.list_tasks(limit)
    return [TaskOut(**r) for r in rows]


@router.get("/stats")
@inject
async def get_task_stats(
    tasks: TaskService = Depends(Provide[Container.tasks]),
) -> TaskStats:
    """Summary over the most recent TASK_STATS_ROW_CAP tasks."""
    with internal_errors("Failed to fetch task stats"):
        rows = await tasks.list_tasks(TASK_STATS_ROW_CAP)
    return summarize_tasks(rows)
