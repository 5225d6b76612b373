"""Entry points that run the import pipeline inside units of work.

Preview and commit each run in their own unit of work. When either fails the
unit of work is rolled back and the failure is recorded on the batch through
a fresh unit of work, so the batch never reflects a partial run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from property_importer.domain.errors import BatchNotFoundError
from property_importer.domain.import_pipeline.commit import CommitResults, ImportCommitter
from property_importer.domain.import_pipeline.context import PipelineContext
from property_importer.domain.import_pipeline.ingestion import RowIngester
from property_importer.domain.import_pipeline.orchestrator import ImportPipeline
from property_importer.domain.import_pipeline.staging import ImportRowBuilder
from property_importer.domain.import_pipeline.summary import SummaryBuilder
from property_importer.domain.import_pipeline.validation import ConflictValidator
from property_importer.domain.model import BatchStatus, ImportBatch

if TYPE_CHECKING:
    from uuid import UUID

    from property_importer.domain.import_pipeline.context import TableSource
    from property_importer.domain.ports import ImportUnitOfWork

log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], ImportUnitOfWork]


@dataclass(frozen=True, slots=True)
class PreviewResult:
    batch_id: UUID
    ok: bool
    status: BatchStatus
    summary: dict[str, Any] = field(default_factory=dict[str, Any])
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CommitResult:
    batch_id: UUID
    ok: bool
    status: BatchStatus
    properties_created: tuple[UUID, ...] = ()
    units_created: tuple[UUID, ...] = ()
    errors: tuple[str, ...] = ()


def default_preview_pipeline() -> ImportPipeline:
    return ImportPipeline(
        phases=(RowIngester(), ImportRowBuilder(), ConflictValidator(), SummaryBuilder())
    )


def _load_batch(uow: ImportUnitOfWork, batch_id: UUID) -> ImportBatch:
    batch = uow.repositories.batches.get(batch_id)
    if batch is None:
        raise BatchNotFoundError(batch_id)
    return batch


def create_batch(filename: str, *, unit_of_work_factory: UnitOfWorkFactory) -> UUID:
    """Persist a new pending batch for ``filename`` and return its id."""

    batch = ImportBatch(filename=filename)
    with unit_of_work_factory() as uow:
        uow.repositories.batches.add(batch)
        uow.commit()
    log.info("Created import batch %s for %s", batch.id, filename)
    return batch.id


def record_failure(
    batch_id: UUID,
    errors: list[str],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    results: dict[str, Any] | None = None,
) -> None:
    """Mark the batch failed in its own unit of work."""

    with unit_of_work_factory() as uow:
        batch = _load_batch(uow, batch_id)
        batch.mark_failed(errors, results=results)
        uow.commit()
    log.warning("Import batch %s failed: %s", batch_id, "; ".join(errors))


def preview_batch(
    batch_id: UUID,
    table_source: TableSource,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    pipeline: ImportPipeline | None = None,
) -> PreviewResult:
    """Ingest, stage and validate the table for a pending batch.

    Raises:
        BatchNotFoundError: when ``batch_id`` does not resolve.
    """

    pipeline = pipeline or default_preview_pipeline()
    with unit_of_work_factory() as uow:
        batch = _load_batch(uow, batch_id)
        if batch.status != BatchStatus.PENDING:
            return PreviewResult(
                batch_id=batch_id,
                ok=False,
                status=batch.status,
                errors=(f"Import batch is {batch.status}, expected pending",),
            )

        context = PipelineContext(repositories=uow.repositories, table_source=table_source)
        try:
            pipeline.run(batch, context=context)
            uow.commit()
        except Exception as exc:  # noqa: BLE001
            uow.rollback()
            error = str(exc)
        else:
            return PreviewResult(
                batch_id=batch_id,
                ok=True,
                status=batch.status,
                summary=dict(batch.summary),
            )

    record_failure(batch_id, [error], unit_of_work_factory=unit_of_work_factory)
    return PreviewResult(batch_id=batch_id, ok=False, status=BatchStatus.FAILED, errors=(error,))


def commit_batch(batch_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory) -> CommitResult:
    """Commit the verified rows of a previewed batch atomically.

    Raises:
        BatchNotFoundError: when ``batch_id`` does not resolve.
    """

    results = CommitResults()
    with unit_of_work_factory() as uow:
        batch = _load_batch(uow, batch_id)
        if not batch.is_previewed:
            return CommitResult(
                batch_id=batch_id,
                ok=False,
                status=batch.status,
                errors=(f"Import batch is {batch.status}, expected previewed",),
            )

        try:
            ImportCommitter(uow.repositories).commit(batch, results=results)
            uow.commit()
        except Exception as exc:  # noqa: BLE001
            uow.rollback()
            error = str(exc)
        else:
            return CommitResult(
                batch_id=batch_id,
                ok=True,
                status=batch.status,
                properties_created=tuple(results.properties_created),
                units_created=tuple(results.units_created),
            )

    record_failure(
        batch_id,
        [error],
        unit_of_work_factory=unit_of_work_factory,
        results=results.as_dict(),
    )
    return CommitResult(
        batch_id=batch_id,
        ok=False,
        status=BatchStatus.FAILED,
        properties_created=tuple(results.properties_created),
        units_created=tuple(results.units_created),
        errors=(error,),
    )
