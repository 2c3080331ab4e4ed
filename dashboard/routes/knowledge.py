#  Agent Dashboard - Knowledge & Skill Routes
#
#  Depends on: container.py, models/schemas.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Query

from dashboard.container import Container
from dashboard.exceptions import internal_errors
from dashboard.models.schemas import GeneratedSkillOut, KnowledgeEntryOut
from dashboard.services.knowledge import DEFAULT_SEARCH_LIMIT, KnowledgeService, SkillService

router = APIRouter(tags=["knowledge"])


@router.get("/knowledge")
@inject
async def search_knowledge(
    query: str = Query(default="", max_length=500),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=1, le=100),
    knowledge: KnowledgeService = Depends(Provide[Container.knowledge]),
) -> list[KnowledgeEntryOut]:
    with internal_errors("Failed to search knowledge base"):
        rows = await knowledge.search(query, limit)
    return [KnowledgeEntryOut(**r) for r in rows]


@router.get("/skills")
@inject
async def list_skills(
    active_only: bool = True,
    skills: SkillService = Depends(Provide[Container.skills]),
) -> list[GeneratedSkillOut]:
    with internal_errors("Failed to fetch skills"):
        rows = await skills.list_skills(active_only)
    return [GeneratedSkillOut(**r) for r in rows]
