#  Agent Dashboard - Alembic Environment
#
#  Points Alembic at the dashboard table metadata. Migrations run on a
#  plain sync engine; the startup runner calls them from a worker thread.
#  SQLite needs batch mode for any ALTER beyond ADD COLUMN.
#
#  Depends on: dashboard/db/models_metadata.py
#  Used by:    alembic CLI, dashboard/db/migrate.py

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from dashboard.db.models_metadata import metadata

config = context.config

# The CLI gets alembic.ini logging; the startup runner keeps the app's own setup
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

_COMMON_OPTS = {"target_metadata": metadata, "render_as_batch": True}


def _offline() -> None:
    """Emit SQL for `alembic upgrade --sql` without touching a database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMMON_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, **_COMMON_OPTS)
        with context.begin_transaction():
            context.run_migrations()


(_offline if context.is_offline_mode() else _online)()
