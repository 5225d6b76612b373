"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from property_importer.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from property_importer.adapters.tabular import read_table
from property_importer.domain.errors import BatchNotFoundError
from property_importer.domain.import_pipeline import (
    CommitResult,
    PreviewResult,
    UnitOfWorkFactory,
    commit_batch,
    create_batch,
    preview_batch,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from typing import Any
    from uuid import UUID

    from property_importer.domain.import_pipeline import CellTable
    from property_importer.domain.model import BatchStatus, RecordType, RowStatus

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RowReport:
    source_row_number: int
    record_type: RecordType
    status: RowStatus
    building_name: str | None
    unit_number: str | None
    messages: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class BatchReport:
    batch_id: UUID
    filename: str
    status: BatchStatus
    created_at: datetime
    imported_at: datetime | None
    summary: dict[str, Any]
    errors: tuple[str, ...]
    rows: tuple[RowReport, ...] = ()


def _resolve_factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyImportUnitOfWork


def preview_table(
    filename: str,
    table: CellTable,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> PreviewResult:
    """Create a batch for an in-memory table and run the preview phases on it."""

    factory = _resolve_factory(unit_of_work_factory)
    batch_id = create_batch(filename, unit_of_work_factory=factory)
    return preview_batch(batch_id, lambda: table, unit_of_work_factory=factory)


def preview_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> PreviewResult:
    """Create a batch named after ``path`` and preview the file's contents.

    The file is read inside the preview, so unreadable or unsupported files
    leave a failed batch behind instead of raising.
    """

    factory = _resolve_factory(unit_of_work_factory)
    batch_id = create_batch(Path(path).name, unit_of_work_factory=factory)
    log.info("Previewing %s as batch %s", path, batch_id)
    return preview_batch(batch_id, lambda: read_table(Path(path)), unit_of_work_factory=factory)


def commit_import(
    batch_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CommitResult:
    """Commit the verified rows of a previewed batch."""

    factory = _resolve_factory(unit_of_work_factory)
    result = commit_batch(batch_id, unit_of_work_factory=factory)
    if result.ok:
        log.info(
            "Imported batch %s: %s properties, %s units",
            batch_id,
            len(result.properties_created),
            len(result.units_created),
        )
    return result


def describe_batch(
    batch_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> BatchReport:
    """Load a batch and its staged rows for display."""

    factory = _resolve_factory(unit_of_work_factory)
    with factory() as uow:
        batch = uow.repositories.batches.get(batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        rows = tuple(
            RowReport(
                source_row_number=row.source_row_number,
                record_type=row.record_type,
                status=row.status,
                building_name=row.building_name,
                unit_number=row.unit_number,
                messages=tuple(row.messages),
            )
            for row in uow.repositories.staged_rows.for_batch(batch_id)
        )
        return BatchReport(
            batch_id=batch.id,
            filename=batch.filename,
            status=batch.status,
            created_at=batch.created_at,
            imported_at=batch.imported_at,
            summary=dict(batch.summary),
            errors=tuple(batch.errors),
            rows=rows,
        )


def list_batches(
    *,
    limit: int = 20,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Sequence[BatchReport]:
    """Return the most recent batches, newest first, without their rows."""

    factory = _resolve_factory(unit_of_work_factory)
    with factory() as uow:
        return [
            BatchReport(
                batch_id=batch.id,
                filename=batch.filename,
                status=batch.status,
                created_at=batch.created_at,
                imported_at=batch.imported_at,
                summary=dict(batch.summary),
                errors=tuple(batch.errors),
            )
            for batch in uow.repositories.batches.recent(limit)
        ]
