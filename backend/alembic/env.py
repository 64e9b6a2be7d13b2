"""Alembic environment configuration."""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection, create_engine, make_url
from sqlalchemy.engine.url import URL

from agro_alertas.db.base import Base
from agro_alertas.db import models  # noqa: F401  # Ensure models are imported

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _resolved_database_url() -> str:
    """Retrieve the database URL and switch async drivers to their sync counterpart."""

    raw_url = config.get_main_option("sqlalchemy.url") or os.environ.get("DATABASE_URL")
    if not raw_url:
        raise RuntimeError("Configure sqlalchemy.url o DATABASE_URL antes de migrar.")
    url: URL = make_url(raw_url)
    if url.drivername.startswith("postgresql"):
        url = url.set(drivername="postgresql+psycopg2")
    resolved = url.render_as_string(hide_password=False)
    print(f"[alembic] Using database URL: {url!r}", flush=True)
    return resolved


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""

    context.configure(
        url=_resolved_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode over a synchronous driver."""

    connectable = create_engine(
        _resolved_database_url(),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        _run_sync_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
