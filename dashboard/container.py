#  Agent Dashboard - Dependency Injection Container
#
#  DeclarativeContainer wiring all services and their dependencies.
#
#  Depends on: db/connection.py, services/*
#  Used by:    app.py, routes/*, middleware/auth.py

import httpx
from dependency_injector import containers, providers

from dashboard.config import LLM_TIMEOUT
from dashboard.db.connection import Database
from dashboard.services.agents import AgentService
from dashboard.services.auth import AuthService
from dashboard.services.chat import ChatService
from dashboard.services.knowledge import KnowledgeService, SkillService
from dashboard.services.llm import LLMClient
from dashboard.services.metrics import MetricsService
from dashboard.services.tasks import TaskService
from dashboard.services.users import UserService


class Container(containers.DeclarativeContainer):
    """DI container for the Agent Dashboard.

    All services are Singletons: one instance per application lifecycle.
    Routes access them via @inject + Depends(Provide[Container.xxx]).
    Tests override them via container.xxx.override(providers.Object(mock)).
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "dashboard.routes.agents",
            "dashboard.routes.tasks",
            "dashboard.routes.chat",
            "dashboard.routes.metrics",
            "dashboard.routes.knowledge",
            "dashboard.routes.auth",
            "dashboard.routes.health",
            "dashboard.middleware.auth",
        ]
    )

    # --- Core ---
    db = providers.Singleton(Database)
    http_client = providers.Singleton(httpx.AsyncClient, timeout=LLM_TIMEOUT)
    llm = providers.Singleton(LLMClient, http_client=http_client)

    # --- Services ---
    auth = providers.Singleton(AuthService)
    users = providers.Singleton(UserService, db=db)
    agents = providers.Singleton(AgentService, db=db)
    tasks = providers.Singleton(TaskService, db=db)
    metrics = providers.Singleton(MetricsService, db=db)
    knowledge = providers.Singleton(KnowledgeService, db=db)
    skills = providers.Singleton(SkillService, db=db)
    chat = providers.Singleton(ChatService, db=db, llm=llm)
