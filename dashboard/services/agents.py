#  Agent Dashboard - Agent Service
#
#  Read accessors for the agents table.
#
#  Depends on: dashboard/db/connection.py
#  Used by:    container.py, routes/agents.py

from dashboard.db.connection import Database
from dashboard.services.rows import row_to_dict, rows_to_dicts


class AgentService:
    def __init__(self, db: Database):
        self._db = db

    async def list_agents(self) -> list[dict]:
        """All agents, ordered by name."""
        rows = await self._db.fetchall("SELECT * FROM agents ORDER BY name ASC, id ASC")
        return rows_to_dicts(rows)

    async def get_agent(self, agent_id: int) -> dict | None:
        """Single agent by ID, or None if absent."""
        row = await self._db.fetchone(
            "SELECT * FROM agents WHERE id = ? LIMIT 1", (agent_id,)
        )
        return row_to_dict(row) if row else None
