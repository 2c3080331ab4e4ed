#  Agent Dashboard - Metrics Service
#
#  System metric snapshots (append-only time series) and the model catalog
#  table used for usage and cost reporting.
#
#  Depends on: dashboard/db/connection.py
#  Used by:    container.py, routes/metrics.py

from dashboard.db.connection import Database
from dashboard.services.rows import row_to_dict, rows_to_dicts

DEFAULT_HISTORY_HOURS = 24

_MODEL_FLAGS = ("supports_vision", "supports_streaming", "is_available")


class MetricsService:
    def __init__(self, db: Database):
        self._db = db

    async def get_latest(self) -> dict | None:
        """Most recent snapshot, or None before the first one is recorded."""
        row = await self._db.fetchone(
            "SELECT * FROM system_metrics ORDER BY timestamp DESC, id DESC LIMIT 1"
        )
        return row_to_dict(row) if row else None

    async def get_history(self, hours: int = DEFAULT_HISTORY_HOURS) -> list[dict]:
        """Up to `hours` snapshots, newest first (one snapshot per hour)."""
        rows = await self._db.fetchall(
            "SELECT * FROM system_metrics ORDER BY timestamp DESC, id DESC LIMIT ?",
            (hours,),
        )
        return rows_to_dicts(rows)

    async def list_available_models(self) -> list[dict]:
        """Models flagged available, by name."""
        rows = await self._db.fetchall(
            "SELECT * FROM models WHERE is_available = 1 ORDER BY name ASC"
        )
        return rows_to_dicts(rows, bool_fields=_MODEL_FLAGS)
