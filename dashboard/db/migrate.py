#  Agent Dashboard - Migration Runner
#
#  Brings a SQLite file to the Alembic head revision at startup. A file
#  built by the inline DDL in connection.py already has every table and
#  trigger but no version row; it is stamped rather than migrated.
#
#  Depends on: dashboard/migrations/
#  Used by:    dashboard/db/connection.py

import logging
from enum import Enum
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

logger = logging.getLogger("dashboard.migrate")

_MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"


class SchemaState(Enum):
    EMPTY = "empty"
    UNVERSIONED = "unversioned"
    VERSIONED = "versioned"


def _alembic_config(url: str) -> Config:
    alembic_cfg = Config(str(_MIGRATIONS_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", url)
    alembic_cfg.set_main_option("script_location", str(_MIGRATIONS_DIR))
    # Leave the app's logging setup alone
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def schema_state(url: str) -> SchemaState:
    """Classify the database by which bookkeeping tables it already has."""
    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()

    if "alembic_version" in tables:
        return SchemaState.VERSIONED
    if "users" in tables:
        return SchemaState.UNVERSIONED
    return SchemaState.EMPTY


def run_migrations(db_path: str | Path) -> SchemaState:
    """Upgrade the database at db_path to head. Returns the state found."""
    url = f"sqlite:///{Path(db_path)}"
    alembic_cfg = _alembic_config(url)

    state = schema_state(url)
    logger.info("Database schema state: %s", state.value)
    if state is SchemaState.UNVERSIONED:
        command.stamp(alembic_cfg, "head")

    command.upgrade(alembic_cfg, "head")
    return state
