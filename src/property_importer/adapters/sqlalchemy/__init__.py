"""SQLAlchemy adapter package for the property importer."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyImportBatchRepository,
    SqlAlchemyPropertyRepository,
    SqlAlchemyStagedRowRepository,
    SqlAlchemyUnitRepository,
)
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyImportBatchRepository",
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyPropertyRepository",
    "SqlAlchemyStagedRowRepository",
    "SqlAlchemyUnitRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
