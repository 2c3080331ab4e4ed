#  Agent Dashboard - Aggregation
#
#  Pure in-memory reductions over fetched rows: status counts, sums and
#  averages for agents and tasks, per-model usage and cost shapes.
#  Recomputed on every call; nothing is cached or maintained incrementally.
#
#  Depends on: models/enums.py, models/schemas.py
#  Used by:    routes/agents.py, routes/tasks.py, routes/metrics.py

from collections import Counter

from dashboard.models.enums import AgentStatus, TaskStatus
from dashboard.models.schemas import (
    AgentStats,
    CostBreakdownItem,
    ModelUsageOut,
    SystemMetricsOut,
    TaskStats,
)


def _num(value) -> float:
    """Treat NULL numeric columns as zero."""
    return float(value) if value is not None else 0.0


def summarize_agents(agents: list[dict]) -> AgentStats:
    """Counts per status, total completed tasks, mean success rate.

    An empty list yields zeros rather than a division error.
    """
    by_status = Counter(a["status"] for a in agents)
    total = len(agents)
    return AgentStats(
        total_agents=total,
        active_agents=by_status[AgentStatus.BUSY.value],
        idle_agents=by_status[AgentStatus.IDLE.value],
        error_agents=by_status[AgentStatus.ERROR.value],
        total_tasks_completed=sum(a.get("tasks_completed") or 0 for a in agents),
        average_success_rate=(
            sum(_num(a.get("success_rate")) for a in agents) / total if total else 0.0
        ),
    )


def summarize_tasks(tasks: list[dict]) -> TaskStats:
    """Counts per status, total actual cost, mean execution time.

    The execution-time mean only covers rows that recorded one.
    """
    by_status = Counter(t["status"] for t in tasks)
    timed = [t["execution_time_ms"] for t in tasks if t.get("execution_time_ms")]
    return TaskStats(
        total=len(tasks),
        pending=by_status[TaskStatus.PENDING.value],
        running=by_status[TaskStatus.RUNNING.value],
        completed=by_status[TaskStatus.COMPLETED.value],
        failed=by_status[TaskStatus.FAILED.value],
        cancelled=by_status[TaskStatus.CANCELLED.value],
        total_cost=round(sum(_num(t.get("actual_cost")) for t in tasks), 4),
        average_execution_time=sum(timed) / len(timed) if timed else 0.0,
    )


def model_usage(models: list[dict]) -> list[ModelUsageOut]:
    return [
        ModelUsageOut(
            id=m["id"],
            name=m["name"],
            provider=m["provider"],
            usage_count=m.get("total_usage_count") or 0,
            total_tokens_used=m.get("total_tokens_used") or 0,
            total_cost=_num(m.get("total_cost")),
            average_latency_ms=_num(m.get("average_latency_ms")),
            context_length=m.get("context_length"),
            supports_vision=bool(m.get("supports_vision")),
            supports_streaming=bool(m.get("supports_streaming")),
        )
        for m in models
    ]


def cost_breakdown(models: list[dict]) -> list[CostBreakdownItem]:
    return [
        CostBreakdownItem(
            model=m["name"],
            cost=_num(m.get("total_cost")),
            usage=m.get("total_usage_count") or 0,
        )
        for m in models
    ]


# Returned by /metrics/latest before the first snapshot is recorded
DEFAULT_METRICS = SystemMetricsOut()
