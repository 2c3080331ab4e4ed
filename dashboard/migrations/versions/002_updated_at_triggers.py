"""Refresh updated_at automatically on UPDATE for mutable tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_MUTABLE_TABLES = (
    "users",
    "agents",
    "tasks",
    "chat_sessions",
    "models",
    "knowledge_base",
    "generated_skills",
)


def upgrade() -> None:
    for table in _MUTABLE_TABLES:
        op.execute(
            f"CREATE TRIGGER IF NOT EXISTS trg_{table}_updated_at "
            f"AFTER UPDATE ON {table} "
            "FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at "
            "BEGIN "
            f"UPDATE {table} SET updated_at = ((julianday('now') - 2440587.5) * 86400.0) "
            "WHERE id = NEW.id; "
            "END"
        )


def downgrade() -> None:
    for table in _MUTABLE_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at")
