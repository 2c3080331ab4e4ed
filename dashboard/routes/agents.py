#  Agent Dashboard - Agent Routes
#
#  Agent listing, detail and fleet-wide summary.
#
#  Depends on: container.py, models/schemas.py, services/stats.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends

from dashboard.container import Container
from dashboard.exceptions import NotFoundError, internal_errors
from dashboard.models.schemas import AgentOut, AgentStats
from dashboard.services.agents import AgentService
from dashboard.services.stats import summarize_agents

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("")
@inject
async def list_agents(
    agents: AgentService = Depends(Provide[Container.agents]),
) -> list[AgentOut]:
    with internal_errors("Failed to fetch agents"):
        rows = await agents.list_agents()
    return [AgentOut(**r) for r in rows]


# Declared before /{agent_id} so "stats" is not parsed as an id
@router.get("/stats")
@inject
async def get_agent_stats(
    agents: AgentService = Depends(Provide[Container.agents]),
) -> AgentStats:
    """Counts per status, total completed tasks and mean success rate."""
    with internal_errors("Failed to fetch agent stats"):
        rows = await agents.list_agents()
    return summarize_agents(rows)


@router.get("/{agent_id}")
@inject
async def get_agent(
    agent_id: int,
    agents: AgentService = Depends(Provide[Container.agents]),
) -> AgentOut:
    with internal_errors("Failed to fetch agent"):
        row = await agents.get_agent(agent_id)
    if not row:
        raise NotFoundError(f"Agent {agent_id} not found")
    return AgentOut(**row)
