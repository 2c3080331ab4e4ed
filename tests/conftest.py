#  Agent Dashboard - Test Fixtures
#
#  Shared fixtures for the test suite.
#  Uses DI container overrides instead of monkey-patching singletons.
#
#  Depends on: dashboard/db/connection.py, dashboard/container.py, dashboard/app.py
#  Used by:    all test files

import json
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from dependency_injector import providers

# Must be set before dashboard.config is first imported
TEST_SECRET = "test-secret-key-that-is-at-least-32-chars"
os.environ.setdefault("JWT_SECRET", TEST_SECRET)

TEST_OPEN_ID = "oid_test_user"


# ---------------------------------------------------------------------------
# Database fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def tmp_db(tmp_path):
    """Create a fresh async database with schema applied."""
    from dashboard.db.connection import Database

    test_db = Database()
    db_path = tmp_path / "test.db"
    await test_db.init(str(db_path))

    yield test_db

    await test_db.close()


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------

async def insert_agent(db, name="agent", status="idle", **fields) -> int:
    values = {"name": name, "role": fields.pop("role", "worker"), "status": status, **fields}
    if "capabilities" in values:
        values["capabilities_json"] = json.dumps(values.pop("capabilities"))
    cols = list(values)
    cursor = await db.execute_write(
        f"INSERT INTO agents ({', '.join(cols)}) VALUES ({', '.join('?' * len(cols))})",
        [values[c] for c in cols],
    )
    return cursor.lastrowid


async def insert_task(db, title="task", status="pending", **fields) -> int:
    values = {"title": title, "status": status, **fields}
    for key in ("input", "output"):
        if key in values:
            values[f"{key}_json"] = json.dumps(values.pop(key))
    cols = list(values)
    cursor = await db.execute_write(
        f"INSERT INTO tasks ({', '.join(cols)}) VALUES ({', '.join('?' * len(cols))})",
        [values[c] for c in cols],
    )
    return cursor.lastrowid


async def insert_model(db, name="model", provider="acme", **fields) -> int:
    values = {"name": name, "provider": provider, **fields}
    cols = list(values)
    cursor = await db.execute_write(
        f"INSERT INTO models ({', '.join(cols)}) VALUES ({', '.join('?' * len(cols))})",
        [values[c] for c in cols],
    )
    return cursor.lastrowid


async def insert_metrics(db, timestamp: float, **fields) -> int:
    values = {"timestamp": timestamp, **fields}
    cols = list(values)
    cursor = await db.execute_write(
        f"INSERT INTO system_metrics ({', '.join(cols)}) VALUES ({', '.join('?' * len(cols))})",
        [values[c] for c in cols],
    )
    return cursor.lastrowid


# ---------------------------------------------------------------------------
# Mock language model
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_llm():
    """LLMClient stand-in whose invoke() returns a canned reply."""
    llm = MagicMock()
    llm.invoke = AsyncMock(return_value="Hello from the model")
    return llm


# ---------------------------------------------------------------------------
# FastAPI TestClient fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def app_client(tmp_db, mock_llm):
    """FastAPI TestClient with a fresh database. Uses DI container overrides.

    Uses explicit try/finally with reset_override() instead of context managers
    so DI state is fully cleaned up between tests.
    """
    from httpx import ASGITransport, AsyncClient
    from dashboard.app import app, container
    from dashboard.services.agents import AgentService
    from dashboard.services.auth import AuthService
    from dashboard.services.chat import ChatService
    from dashboard.services.knowledge import KnowledgeService, SkillService
    from dashboard.services.metrics import MetricsService
    from dashboard.services.tasks import TaskService
    from dashboard.services.users import UserService

    mock_http = AsyncMock()
    mock_http.aclose = AsyncMock()

    overrides = {
        "db": tmp_db,
        "http_client": mock_http,
        "llm": mock_llm,
        "auth": AuthService(secret_key=TEST_SECRET),
        "users": UserService(db=tmp_db, owner_open_id="oid_owner"),
        "agents": AgentService(db=tmp_db),
        "tasks": TaskService(db=tmp_db),
        "metrics": MetricsService(db=tmp_db),
        "knowledge": KnowledgeService(db=tmp_db),
        "skills": SkillService(db=tmp_db),
        "chat": ChatService(db=tmp_db, llm=mock_llm),
    }

    init_patcher = patch.object(tmp_db, "init", new_callable=AsyncMock)

    for name, obj in overrides.items():
        getattr(container, name).override(providers.Object(obj))
    init_patcher.start()

    # Reset rate limiter storage so tests don't hit limits from prior tests
    from dashboard.rate_limit import limiter as _limiter
    _limiter.reset()

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        init_patcher.stop()
        for name in overrides:
            getattr(container, name).reset_override()


def make_token(open_id: str = TEST_OPEN_ID, **claims) -> str:
    from dashboard.services.auth import AuthService
    return AuthService(secret_key=TEST_SECRET).create_access_token(open_id, **claims)


@pytest.fixture
async def authed_client(app_client):
    """app_client with a bearer token for TEST_OPEN_ID."""
    token = make_token(TEST_OPEN_ID, name="Test User", email="test@example.com")
    app_client.headers["Authorization"] = f"Bearer {token}"
    yield app_client
