"""Staged property import pipeline: preview phases, commit and runners."""

from __future__ import annotations

from property_importer.domain.import_pipeline.commit import CommitResults, ImportCommitter
from property_importer.domain.import_pipeline.context import (
    CellTable,
    PipelineContext,
    PreviewCounters,
    RawRow,
    TableSource,
)
from property_importer.domain.import_pipeline.ingestion import (
    REQUIRED_HEADERS,
    Header,
    RowIngester,
    ingest_rows,
    missing_headers,
)
from property_importer.domain.import_pipeline.orchestrator import ImportPipeline, PipelinePhase
from property_importer.domain.import_pipeline.runner import (
    CommitResult,
    PreviewResult,
    UnitOfWorkFactory,
    commit_batch,
    create_batch,
    default_preview_pipeline,
    preview_batch,
    record_failure,
)
from property_importer.domain.import_pipeline.staging import (
    KEY_SEPARATOR,
    ImportRowBuilder,
    building_key,
    parse_property_fields,
    parse_unit_fields,
    stage_rows,
)
from property_importer.domain.import_pipeline.summary import SummaryBuilder, build_summary
from property_importer.domain.import_pipeline.validation import ConflictValidator, validate

__all__ = [
    "KEY_SEPARATOR",
    "REQUIRED_HEADERS",
    "CellTable",
    "CommitResult",
    "CommitResults",
    "ConflictValidator",
    "Header",
    "ImportCommitter",
    "ImportPipeline",
    "ImportRowBuilder",
    "PipelineContext",
    "PipelinePhase",
    "PreviewCounters",
    "PreviewResult",
    "RawRow",
    "RowIngester",
    "SummaryBuilder",
    "TableSource",
    "UnitOfWorkFactory",
    "building_key",
    "build_summary",
    "commit_batch",
    "create_batch",
    "default_preview_pipeline",
    "ingest_rows",
    "missing_headers",
    "parse_property_fields",
    "parse_unit_fields",
    "preview_batch",
    "record_failure",
    "stage_rows",
    "validate",
]
