"""Shared state threaded through the preview phases of the import pipeline."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from property_importer.domain.model import OriginalRow

if TYPE_CHECKING:
    from property_importer.domain.ports import ImportRepositories

type CellTable = Sequence[Sequence[str | None]]
type TableSource = Callable[[], CellTable]


@dataclass(slots=True)
class RawRow:
    """One non-blank data row keyed by header, with its 1-based source row number."""

    values: dict[str, str]
    source_row_number: int

    def to_original(self) -> OriginalRow:
        return OriginalRow(values=dict(self.values), source_row_number=self.source_row_number)


@dataclass(slots=True)
class PreviewCounters:
    ingested_rows: int = 0
    property_rows: int = 0
    unit_rows: int = 0
    verified_rows: int = 0
    rejected_rows: int = 0


@dataclass(slots=True)
class PipelineContext:
    """Per-run context handed to every phase."""

    repositories: ImportRepositories
    table_source: TableSource | None = None
    raw_rows: list[RawRow] = field(default_factory=list[RawRow])
    counters: PreviewCounters = field(default_factory=PreviewCounters)
