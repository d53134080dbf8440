"""Migration runner for the InventHub schema. Reads DATABASE_URL directly."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from inventhub.db import migration_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Migrations use raw SQL DDL, so there is no metadata to autogenerate from
config.set_main_option("sqlalchemy.url", migration_url(os.environ.get("DATABASE_URL", "")))


def _configure_and_run(**options) -> None:
    context.configure(target_metadata=None, **options)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit the migration SQL to stdout instead of applying it."""
    _configure_and_run(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def run_online() -> None:
    """Apply migrations over one short-lived connection."""
    engine = create_engine(config.get_main_option("sqlalchemy.url"), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _configure_and_run(connection=connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
