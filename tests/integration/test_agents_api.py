#  Agent Dashboard - Agents API Integration Tests
#
#  Agent listing, detail and stats via HTTP.
#
#  Depends on: dashboard/routes/agents.py, tests/conftest.py
#  Used by:    pytest

from unittest.mock import AsyncMock, patch

import pytest

from dashboard.app import container
from dashboard.exceptions import DatabaseUnavailableError
from tests.conftest import insert_agent


class TestListAgents:
    async def test_empty(self, app_client):
        resp = await app_client.get("/api/agents")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_ordered_by_name_with_decoded_capabilities(self, app_client, tmp_db):
        await insert_agent(tmp_db, "zed", capabilities={"tools": ["git"]})
        await insert_agent(tmp_db, "amy", status="busy")

        resp = await app_client.get("/api/agents")
        assert resp.status_code == 200
        body = resp.json()
        assert [a["name"] for a in body] == ["amy", "zed"]
        assert body[0]["status"] == "busy"
        assert body[1]["capabilities"] == {"tools": ["git"]}


class TestGetAgent:
    async def test_found(self, app_client, tmp_db):
        agent_id = await insert_agent(tmp_db, "solo", role="planner")
        resp = await app_client.get(f"/api/agents/{agent_id}")
        assert resp.status_code == 200
        assert resp.json()["role"] == "planner"

    async def test_not_found(self, app_client):
        resp = await app_client.get("/api/agents/999")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Agent 999 not found", "code": "not_found"}

    async def test_non_integer_id(self, app_client):
        resp = await app_client.get("/api/agents/abc")
        assert resp.status_code == 422
        assert resp.json()["code"] == "validation"


class TestAgentStats:
    async def test_empty(self, app_client):
        resp = await app_client.get("/api/agents/stats")
        assert resp.status_code == 200
        assert resp.json() == {
            "total_agents": 0,
            "active_agents": 0,
            "idle_agents": 0,
            "error_agents": 0,
            "total_tasks_completed": 0,
            "average_success_rate": 0.0,
        }

    async def test_counts(self, app_client, tmp_db):
        await insert_agent(tmp_db, "a", status="busy", tasks_completed=4, success_rate=80.0)
        await insert_agent(tmp_db, "b", status="idle", tasks_completed=1, success_rate=100.0)
        await insert_agent(tmp_db, "c", status="error", tasks_completed=0, success_rate=60.0)

        stats = (await app_client.get("/api/agents/stats")).json()
        assert stats["total_agents"] == 3
        assert stats["active_agents"] == 1
        assert stats["idle_agents"] == 1
        assert stats["error_agents"] == 1
        assert stats["total_tasks_completed"] == 5
        assert stats["average_success_rate"] == pytest.approx(80.0)


class TestErrorMapping:
    async def test_unavailable_database_returns_503(self, app_client):
        agents = container.agents()
        failing = AsyncMock(side_effect=DatabaseUnavailableError("Database not available"))
        with patch.object(agents, "list_agents", failing):
            resp = await app_client.get("/api/agents")
        assert resp.status_code == 503
        assert resp.json() == {"detail": "Database not available", "code": "unavailable"}

    async def test_unexpected_failure_is_internal(self, app_client):
        agents = container.agents()
        with patch.object(agents, "list_agents", AsyncMock(side_effect=KeyError("boom"))):
            resp = await app_client.get("/api/agents/stats")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Failed to fetch agent stats", "code": "internal"}


class TestDefaultRateLimit:
    async def test_undecorated_route_limited(self, app_client):
        """server.rate_limit (60/minute by default) covers routes without their own limit."""
        codes = [(await app_client.get("/api/agents")).status_code for _ in range(61)]
        assert codes[:60] == [200] * 60
        assert codes[60] == 429

    async def test_limited_response_body(self, app_client):
        for _ in range(60):
            await app_client.get("/api/agents/stats")
        resp = await app_client.get("/api/agents/stats")
        assert resp.status_code == 429
        assert resp.json()["code"] == "rate_limited"
        assert resp.headers.get("x-request-id")
