#  Agent Dashboard - Database Connection
#
#  Process-wide async SQLite handle with WAL mode; every write commits on its own.
#  Initialized at most once; a failed init leaves the handle null and every
#  accessor fails fast with DatabaseUnavailableError.
#  Production uses Alembic migrations; tests use inline schema for speed.
#
#  Depends on: dashboard/db/migrate.py (optional, for production migrations)
#  Used by:    container.py (via DI), services/*, tests

import asyncio
import logging
import sqlite3
from pathlib import Path

import aiosqlite

from dashboard.exceptions import DatabaseUnavailableError

logger = logging.getLogger("dashboard.db")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

# Epoch seconds with sub-second precision, evaluated by SQLite
NOW_SQL = "((julianday('now') - 2440587.5) * 86400.0)"

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    open_id TEXT NOT NULL UNIQUE,
    name TEXT,
    email TEXT,
    login_method TEXT,
    role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL},
    last_signed_in REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS agents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    role TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'idle'
        CHECK (status IN ('idle', 'busy', 'error', 'paused')),
    current_task_id INTEGER,
    capabilities_json TEXT,
    max_context_length INTEGER DEFAULT 16000,
    tasks_completed INTEGER DEFAULT 0,
    total_tokens_used INTEGER DEFAULT 0,
    average_response_time REAL DEFAULT 0,
    success_rate REAL DEFAULT 100,
    last_activity_at REAL DEFAULT {NOW_SQL},
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT,
    agent_id INTEGER,
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'running', 'completed', 'failed', 'cancelled')),
    priority TEXT NOT NULL DEFAULT 'medium'
        CHECK (priority IN ('low', 'medium', 'high', 'critical')),
    input_json TEXT,
    output_json TEXT,
    error TEXT,
    tokens_used INTEGER DEFAULT 0,
    estimated_cost REAL DEFAULT 0,
    actual_cost REAL DEFAULT 0,
    execution_time_ms INTEGER,
    started_at REAL,
    completed_at REAL,
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS chat_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    title TEXT,
    model_used TEXT NOT NULL,
    total_tokens_used INTEGER DEFAULT 0,
    total_cost REAL DEFAULT 0,
    message_count INTEGER DEFAULT 0,
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS chat_messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL,
    role TEXT NOT NULL CHECK (role IN ('user', 'assistant', 'system')),
    content TEXT NOT NULL,
    model TEXT,
    tokens_used INTEGER,
    cost REAL,
    metadata_json TEXT,
    created_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS models (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    provider TEXT NOT NULL,
    context_length INTEGER,
    cost_per_1k_input_tokens REAL,
    cost_per_1k_output_tokens REAL,
    supports_vision INTEGER DEFAULT 0,
    supports_streaming INTEGER DEFAULT 1,
    capabilities_json TEXT,
    is_available INTEGER DEFAULT 1,
    total_usage_count INTEGER DEFAULT 0,
    total_tokens_used INTEGER DEFAULT 0,
    total_cost REAL DEFAULT 0,
    average_latency_ms REAL DEFAULT 0,
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS system_metrics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp REAL NOT NULL DEFAULT {NOW_SQL},
    total_tasks_completed INTEGER DEFAULT 0,
    total_tasks_failed INTEGER DEFAULT 0,
    success_rate REAL DEFAULT 100,
    average_response_time_ms REAL DEFAULT 0,
    total_tokens_used INTEGER DEFAULT 0,
    total_cost_usd REAL DEFAULT 0,
    active_agents INTEGER DEFAULT 0,
    idle_agents INTEGER DEFAULT 0,
    error_agents INTEGER DEFAULT 0,
    system_health REAL DEFAULT 100,
    created_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS knowledge_base (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    category TEXT,
    embedding_json TEXT,
    source TEXT,
    relevance_score REAL,
    access_count INTEGER DEFAULT 0,
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

CREATE TABLE IF NOT EXISTS generated_skills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    skill_code TEXT,
    generated_from TEXT,
    success_rate REAL DEFAULT 0,
    usage_count INTEGER DEFAULT 0,
    is_active INTEGER DEFAULT 1,
    performance_metrics_json TEXT,
    created_at REAL NOT NULL DEFAULT {NOW_SQL},
    updated_at REAL NOT NULL DEFAULT {NOW_SQL}
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);
CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at);
CREATE INDEX IF NOT EXISTS idx_sessions_user ON chat_sessions(user_id);
CREATE INDEX IF NOT EXISTS idx_messages_session ON chat_messages(session_id);
CREATE INDEX IF NOT EXISTS idx_metrics_timestamp ON system_metrics(timestamp);
"""

# Tables carrying an auto-refreshed updated_at
MUTABLE_TABLES = (
    "users",
    "agents",
    "tasks",
    "chat_sessions",
    "models",
    "knowledge_base",
    "generated_skills",
)

# Fires only when the UPDATE itself left updated_at alone
TOUCH_TRIGGER_SQL = """
CREATE TRIGGER IF NOT EXISTS trg_{table}_updated_at
AFTER UPDATE ON {table}
FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at
BEGIN
    UPDATE {table} SET updated_at = {now} WHERE id = NEW.id;
END;
"""


def _full_schema() -> str:
    triggers = "".join(
        TOUCH_TRIGGER_SQL.format(table=t, now=NOW_SQL) for t in MUTABLE_TABLES
    )
    return _SCHEMA + triggers


# ---------------------------------------------------------------------------
# Database class
# ---------------------------------------------------------------------------

class Database:
    """Async SQLite database with WAL mode.

    Uses aiosqlite which runs SQLite on a dedicated background thread,
    so no threading.Lock is needed on our side.

    The handle is created at most once per process. If init() fails the
    connection stays None; it is never retried and every accessor raises
    DatabaseUnavailableError.
    """

    def __init__(self):
        self._conn: aiosqlite.Connection | None = None
        self._path: Path | None = None
        self._init_attempted: bool = False

    async def init(self, db_path: str | Path, *, run_migrations: bool = False):
        """Open or create the database and apply schema.

        Args:
            db_path: Path to the SQLite database file.
            run_migrations: If True, use Alembic migrations (production).
                            If False, use inline schema (tests, faster).
        """
        if self._init_attempted:
            return
        self._init_attempted = True
        self._path = Path(db_path)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)

            if run_migrations:
                from dashboard.db.migrate import run_migrations as _migrate
                await asyncio.to_thread(_migrate, self._path)

            conn = await aiosqlite.connect(str(self._path))
            conn.row_factory = sqlite3.Row
            await conn.execute("PRAGMA journal_mode=WAL")

            if not run_migrations:
                await conn.executescript(_full_schema())
                await conn.commit()
        except Exception as e:
            logger.warning("Failed to connect to database at %s: %s", self._path, e, exc_info=True)
            self._conn = None
            return

        self._conn = conn
        logger.info("Database initialized at %s", self._path)

    @property
    def available(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise DatabaseUnavailableError("Database not available")
        return self._conn

    async def execute_write(self, sql: str, params: tuple | list = ()) -> aiosqlite.Cursor:
        """Run one write statement and commit it."""
        cursor = await self.conn.execute(sql, params)
        await self.conn.commit()
        return cursor

    async def fetchone(self, sql: str, params: tuple | list = ()) -> sqlite3.Row | None:
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: tuple | list = ()) -> list[sqlite3.Row]:
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchall()

    async def close(self):
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
