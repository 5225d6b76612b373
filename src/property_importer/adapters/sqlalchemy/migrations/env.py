"""Alembic environment for the property importer schema.

Callers inside the application hand over an open connection through
``config.attributes["connection"]``; the ``alembic`` command line falls back
to ``sqlalchemy.url`` or the configured database URI.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from alembic import context
from sqlalchemy import create_engine, pool

from property_importer.adapters.sqlalchemy import mapper_registry, start_mappers
from property_importer.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

log = logging.getLogger("alembic.env")

config = context.config

start_mappers()

target_metadata = mapper_registry.metadata

# SQLite needs batch mode for ALTER TABLE
MIGRATION_OPTIONS: Final[dict[str, Any]] = {
    "target_metadata": target_metadata,
    "render_as_batch": True,
    "compare_type": True,
    "compare_server_default": True,
}


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _run_with(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit the migration SQL for ``_database_url()`` without connecting."""

    context.configure(url=_database_url(), literal_binds=True, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    shared: Connection | None = config.attributes.get("connection")
    if shared is not None:
        _run_with(shared)
        return

    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _run_with(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    log.info("Rendering property importer migrations offline")
    run_migrations_offline()
else:
    run_migrations_online()
