#  Agent Dashboard - Metrics Routes
#
#  System metric snapshots, per-model usage and cost breakdown.
#
#  Depends on: container.py, models/schemas.py, services/stats.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Query

from dashboard.container import Container
from dashboard.exceptions import internal_errors
from dashboard.models.schemas import CostBreakdownItem, ModelUsageOut, SystemMetricsOut
from dashboard.services.metrics import DEFAULT_HISTORY_HOURS, MetricsService
from dashboard.services.stats import DEFAULT_METRICS, cost_breakdown, model_usage

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/latest")
@inject
async def get_latest_metrics(
    metrics: MetricsService = Depends(Provide[Container.metrics]),
) -> SystemMetricsOut:
    """Latest snapshot, or zeroed defaults before the first one exists."""
    with internal_errors("Failed to fetch metrics"):
        row = await metrics.get_latest()
    return SystemMetricsOut(**row) if row else DEFAULT_METRICS


@router.get("/history")
@inject
async def get_metrics_history(
    hours: int = Query(default=DEFAULT_HISTORY_HOURS, ge=1, le=24 * 90),
    metrics: MetricsService = Depends(Provide[Container.metrics]),
) -> list[SystemMetricsOut]:
    with internal_errors("Failed to fetch metrics history"):
        rows = await metrics.get_history(hours)
    return [SystemMetricsOut(**r) for r in rows]


@router.get("/models")
@inject
async def get_model_usage(
    metrics: MetricsService = Depends(Provide[Container.metrics]),
) -> list[ModelUsageOut]:
    with internal_errors("Failed to fetch model usage"):
        rows = await metrics.list_available_models()
    return model_usage(rows)


@router.get("/cost-breakdown")
@inject
async def get_cost_breakdown(
    metrics: MetricsService = Depends(Provide[Container.metrics]),
) -> list[CostBreakdownItem]:
    with internal_errors("Failed to fetch cost breakdown"):
        rows = await metrics.list_available_models()
    return cost_breakdown(rows)
