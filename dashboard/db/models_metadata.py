#  Agent Dashboard - SQLAlchemy Table Metadata
#
#  Declarative Table definitions for Alembic autogenerate.
#  These mirror the SQLite schema but are NOT used at runtime;
#  the app still uses raw SQL via aiosqlite.
#
#  Depends on: (none)
#  Used by:    migrations/env.py (Alembic autogenerate), tests/unit/test_migrations.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    text,
)

metadata = MetaData()

_NOW = text("((julianday('now') - 2440587.5) * 86400.0)")


def _timestamps(*, mutable: bool = True) -> list[Column]:
    cols = [Column("created_at", Float, nullable=False, server_default=_NOW)]
    if mutable:
        cols.append(Column("updated_at", Float, nullable=False, server_default=_NOW))
    return cols


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("open_id", Text, nullable=False, unique=True),
    Column("name", Text),
    Column("email", Text),
    Column("login_method", Text),
    Column("role", Text, nullable=False, server_default="user"),
    *_timestamps(),
    Column("last_signed_in", Float, nullable=False, server_default=_NOW),
    CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
)

agents = Table(
    "agents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("role", Text, nullable=False),
    Column("status", Text, nullable=False, server_default="idle"),
    Column("current_task_id", Integer),
    Column("capabilities_json", Text),
    Column("max_context_length", Integer, server_default="16000"),
    Column("tasks_completed", Integer, server_default="0"),
    Column("total_tokens_used", Integer, server_default="0"),
    Column("average_response_time", Float, server_default="0"),
    Column("success_rate", Float, server_default="100"),
    Column("last_activity_at", Float, server_default=_NOW),
    *_timestamps(),
    CheckConstraint("status IN ('idle', 'busy', 'error', 'paused')", name="ck_agents_status"),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("agent_id", Integer),
    Column("status", Text, nullable=False, server_default="pending"),
    Column("priority", Text, nullable=False, server_default="medium"),
    Column("input_json", Text),
    Column("output_json", Text),
    Column("error", Text),
    Column("tokens_used", Integer, server_default="0"),
    Column("estimated_cost", Float, server_default="0"),
    Column("actual_cost", Float, server_default="0"),
    Column("execution_time_ms", Integer),
    Column("started_at", Float),
    Column("completed_at", Float),
    *_timestamps(),
    CheckConstraint(
        "status IN ('pending', 'running', 'completed', 'failed', 'cancelled')",
        name="ck_tasks_status",
    ),
    CheckConstraint(
        "priority IN ('low', 'medium', 'high', 'critical')",
        name="ck_tasks_priority",
    ),
)

chat_sessions = Table(
    "chat_sessions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("title", Text),
    Column("model_used", Text, nullable=False),
    Column("total_tokens_used", Integer, server_default="0"),
    Column("total_cost", Float, server_default="0"),
    Column("message_count", Integer, server_default="0"),
    *_timestamps(),
)

chat_messages = Table(
    "chat_messages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("session_id", Integer, nullable=False),
    Column("role", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("model", Text),
    Column("tokens_used", Integer),
    Column("cost", Float),
    Column("metadata_json", Text),
    *_timestamps(mutable=False),
    CheckConstraint("role IN ('user', 'assistant', 'system')", name="ck_chat_messages_role"),
)

models = Table(
    "models",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("provider", Text, nullable=False),
    Column("context_length", Integer),
    Column("cost_per_1k_input_tokens", Float),
    Column("cost_per_1k_output_tokens", Float),
    Column("supports_vision", Integer, server_default="0"),
    Column("supports_streaming", Integer, server_default="1"),
    Column("capabilities_json", Text),
    Column("is_available", Integer, server_default="1"),
    Column("total_usage_count", Integer, server_default="0"),
    Column("total_tokens_used", Integer, server_default="0"),
    Column("total_cost", Float, server_default="0"),
    Column("average_latency_ms", Float, server_default="0"),
    *_timestamps(),
)

system_metrics = Table(
    "system_metrics",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("timestamp", Float, nullable=False, server_default=_NOW),
    Column("total_tasks_completed", Integer, server_default="0"),
    Column("total_tasks_failed", Integer, server_default="0"),
    Column("success_rate", Float, server_default="100"),
    Column("average_response_time_ms", Float, server_default="0"),
    Column("total_tokens_used", Integer, server_default="0"),
    Column("total_cost_usd", Float, server_default="0"),
    Column("active_agents", Integer, server_default="0"),
    Column("idle_agents", Integer, server_default="0"),
    Column("error_agents", Integer, server_default="0"),
    Column("system_health", Float, server_default="100"),
    *_timestamps(mutable=False),
)

knowledge_base = Table(
    "knowledge_base",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("category", Text),
    Column("embedding_json", Text),
    Column("source", Text),
    Column("relevance_score", Float),
    Column("access_count", Integer, server_default="0"),
    *_timestamps(),
)

generated_skills = Table(
    "generated_skills",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("description", Text),
    Column("skill_code", Text),
    Column("generated_from", Text),
    Column("success_rate", Float, server_default="0"),
    Column("usage_count", Integer, server_default="0"),
    Column("is_active", Integer, server_default="1"),
    Column("performance_metrics_json", Text),
    *_timestamps(),
)

# Indexes
Index("idx_tasks_status", tasks.c.status)
Index("idx_tasks_created", tasks.c.created_at)
Index("idx_sessions_user", chat_sessions.c.user_id)
Index("idx_messages_session", chat_messages.c.session_id)
Index("idx_metrics_timestamp", system_metrics.c.timestamp)
