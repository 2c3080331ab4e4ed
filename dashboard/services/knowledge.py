#  Agent Dashboard - Knowledge Base & Generated Skills
#
#  Read accessors for the knowledge_base and generated_skills tables.
#
#  Depends on: dashboard/db/connection.py
#  Used by:    container.py, routes/knowledge.py

from dashboard.db.connection import Database
from dashboard.services.rows import rows_to_dicts

DEFAULT_SEARCH_LIMIT = 10


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class KnowledgeService:
    def __init__(self, db: Database):
        self._db = db

    async def search(self, query: str = "", limit: int = DEFAULT_SEARCH_LIMIT) -> list[dict]:
        """Entries whose title, content or category contains `query`.

        A blank query returns the most accessed entries. Matching is a plain
        substring test; the stored embeddings are not consulted.
        """
        query = query.strip()
        if not query:
            rows = await self._db.fetchall(
                "SELECT * FROM knowledge_base ORDER BY access_count DESC, id ASC LIMIT ?",
                (limit,),
            )
        else:
            pattern = _like_pattern(query)
            rows = await self._db.fetchall(
                "SELECT * FROM knowledge_base "
                "WHERE title LIKE ? ESCAPE '\\' OR content LIKE ? ESCAPE '\\' "
                "OR category LIKE ? ESCAPE '\\' "
                "ORDER BY access_count DESC, id ASC LIMIT ?",
                (pattern, pattern, pattern, limit),
            )
        return rows_to_dicts(rows)


class SkillService:
    def __init__(self, db: Database):
        self._db = db

    async def list_skills(self, active_only: bool = True) -> list[dict]:
        if active_only:
            rows = await self._db.fetchall(
                "SELECT * FROM generated_skills WHERE is_active = 1 ORDER BY name ASC, id ASC"
            )
        else:
            rows = await self._db.fetchall(
                "SELECT * FROM generated_skills ORDER BY name ASC, id ASC"
            )
        return rows_to_dicts(rows, bool_fields=("is_active",))
