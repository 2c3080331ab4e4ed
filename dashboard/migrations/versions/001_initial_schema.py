"""Initial schema: 9 tables and 5 indexes.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_NOW = sa.text("((julianday('now') - 2440587.5) * 86400.0)")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("open_id", sa.Text, nullable=False, unique=True),
        sa.Column("name", sa.Text),
        sa.Column("email", sa.Text),
        sa.Column("login_method", sa.Text),
        sa.Column("role", sa.Text, nullable=False, server_default="user"),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("last_signed_in", sa.Float, nullable=False, server_default=_NOW),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("role", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="idle"),
        sa.Column("current_task_id", sa.Integer),
        sa.Column("capabilities_json", sa.Text),
        sa.Column("max_context_length", sa.Integer, server_default="16000"),
        sa.Column("tasks_completed", sa.Integer, server_default="0"),
        sa.Column("total_tokens_used", sa.Integer, server_default="0"),
        sa.Column("average_response_time", sa.Float, server_default="0"),
        sa.Column("success_rate", sa.Float, server_default="100"),
        sa.Column("last_activity_at", sa.Float, server_default=_NOW),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
        sa.CheckConstraint(
            "status IN ('idle', 'busy', 'error', 'paused')", name="ck_agents_status"
        ),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("agent_id", sa.Integer),
        sa.Column("status", sa.Text, nullable=False, server_default="pending"),
        sa.Column("priority", sa.Text, nullable=False, server_default="medium"),
        sa.Column("input_json", sa.Text),
        sa.Column("output_json", sa.Text),
        sa.Column("error", sa.Text),
        sa.Column("tokens_used", sa.Integer, server_default="0"),
        sa.Column("estimated_cost", sa.Float, server_default="0"),
        sa.Column("actual_cost", sa.Float, server_default="0"),
        sa.Column("execution_time_ms", sa.Integer),
        sa.Column("started_at", sa.Float),
        sa.Column("completed_at", sa.Float),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed', 'cancelled')",
            name="ck_tasks_status",
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'critical')", name="ck_tasks_priority"
        ),
    )

    op.create_table(
        "chat_sessions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("title", sa.Text),
        sa.Column("model_used", sa.Text, nullable=False),
        sa.Column("total_tokens_used", sa.Integer, server_default="0"),
        sa.Column("total_cost", sa.Float, server_default="0"),
        sa.Column("message_count", sa.Integer, server_default="0"),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
    )

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.Integer, nullable=False),
        sa.Column("role", sa.Text, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("model", sa.Text),
        sa.Column("tokens_used", sa.Integer),
        sa.Column("cost", sa.Float),
        sa.Column("metadata_json", sa.Text),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.CheckConstraint(
            "role IN ('user', 'assistant', 'system')", name="ck_chat_messages_role"
        ),
    )

    op.create_table(
        "models",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("provider", sa.Text, nullable=False),
        sa.Column("context_length", sa.Integer),
        sa.Column("cost_per_1k_input_tokens", sa.Float),
        sa.Column("cost_per_1k_output_tokens", sa.Float),
        sa.Column("supports_vision", sa.Integer, server_default="0"),
        sa.Column("supports_streaming", sa.Integer, server_default="1"),
        sa.Column("capabilities_json", sa.Text),
        sa.Column("is_available", sa.Integer, server_default="1"),
        sa.Column("total_usage_count", sa.Integer, server_default="0"),
        sa.Column("total_tokens_used", sa.Integer, server_default="0"),
        sa.Column("total_cost", sa.Float, server_default="0"),
        sa.Column("average_latency_ms", sa.Float, server_default="0"),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
    )

    op.create_table(
        "system_metrics",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("timestamp", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("total_tasks_completed", sa.Integer, server_default="0"),
        sa.Column("total_tasks_failed", sa.Integer, server_default="0"),
        sa.Column("success_rate", sa.Float, server_default="100"),
        sa.Column("average_response_time_ms", sa.Float, server_default="0"),
        sa.Column("total_tokens_used", sa.Integer, server_default="0"),
        sa.Column("total_cost_usd", sa.Float, server_default="0"),
        sa.Column("active_agents", sa.Integer, server_default="0"),
        sa.Column("idle_agents", sa.Integer, server_default="0"),
        sa.Column("error_agents", sa.Integer, server_default="0"),
        sa.Column("system_health", sa.Float, server_default="100"),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
    )

    op.create_table(
        "knowledge_base",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("category", sa.Text),
        sa.Column("embedding_json", sa.Text),
        sa.Column("source", sa.Text),
        sa.Column("relevance_score", sa.Float),
        sa.Column("access_count", sa.Integer, server_default="0"),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
    )

    op.create_table(
        "generated_skills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("skill_code", sa.Text),
        sa.Column("generated_from", sa.Text),
        sa.Column("success_rate", sa.Float, server_default="0"),
        sa.Column("usage_count", sa.Integer, server_default="0"),
        sa.Column("is_active", sa.Integer, server_default="1"),
        sa.Column("performance_metrics_json", sa.Text),
        sa.Column("created_at", sa.Float, nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.Float, nullable=False, server_default=_NOW),
    )

    op.create_index("idx_tasks_status", "tasks", ["status"])
    op.create_index("idx_tasks_created", "tasks", ["created_at"])
    op.create_index("idx_sessions_user", "chat_sessions", ["user_id"])
    op.create_index("idx_messages_session", "chat_messages", ["session_id"])
    op.create_index("idx_metrics_timestamp", "system_metrics", ["timestamp"])


def downgrade() -> None:
    op.drop_index("idx_metrics_timestamp", table_name="system_metrics")
    op.drop_index("idx_messages_session", table_name="chat_messages")
    op.drop_index("idx_sessions_user", table_name="chat_sessions")
    op.drop_index("idx_tasks_created", table_name="tasks")
    op.drop_index("idx_tasks_status", table_name="tasks")

    for table in (
        "generated_skills",
        "knowledge_base",
        "system_metrics",
        "models",
        "chat_messages",
        "chat_sessions",
        "tasks",
        "agents",
        "users",
    ):
        op.drop_table(table)
