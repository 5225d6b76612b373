"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ImportBatchRepository,
    PropertyRepository,
    Repository,
    StagedRowRepository,
    UnitRepository,
)
from .unit_of_work import (
    ImportRepositories,
    ImportUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ImportBatchRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
    "PropertyRepository",
    "Repository",
    "RepositoryCollection",
    "StagedRowRepository",
    "UnitOfWork",
    "UnitRepository",
]
