"""Ports for persisting canonical properties and staged import data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from property_importer.domain.model import ImportBatch, Property, StagedRow, Unit

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from property_importer.domain.model import Address, RowStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class PropertyRepository(Repository[Property], Protocol):
    """Read/write access to the canonical property store, keyed by its unique keys."""

    def get_by_name(self, building_name: str) -> Property | None: ...

    def get_by_address(self, address: Address) -> Property | None: ...

    def find_exact(self, building_name: str, address: Address) -> Property | None: ...

    def has_unit(self, property_: Property, unit_number: str) -> bool: ...


@runtime_checkable
class UnitRepository(Repository[Unit], Protocol):
    """Persistence contract for canonical units."""


@runtime_checkable
class ImportBatchRepository(Repository[ImportBatch], Protocol):
    """Persistence contract for import batches."""

    def get(self, batch_id: UUID) -> ImportBatch | None: ...

    def recent(self, limit: int = 20) -> Sequence[ImportBatch]: ...


@runtime_checkable
class StagedRowRepository(Repository[StagedRow], Protocol):
    """Persistence contract for staged rows."""

    def for_batch(self, batch_id: UUID) -> Sequence[StagedRow]: ...

    def update_status(self, rows: Iterable[StagedRow], status: RowStatus) -> int: ...
