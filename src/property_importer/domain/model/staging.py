"""Staging entities: an import batch owns the candidate rows extracted from one file.

Rows move ``pending -> verified | rejected`` during validation and
``verified -> imported`` during commit. Rejected and pending rows are never
touched by commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from property_importer.domain.errors import InvalidRecordError
from property_importer.domain.model.base import Entity, utc_now
from property_importer.domain.model.enums import BatchStatus, RecordType, RowStatus
from property_importer.domain.model.primitives import OriginalRow, PropertyFields, UnitFields

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from property_importer.domain.model.property import Property

MESSAGE_SEPARATOR = "; "


@dataclass(eq=False, kw_only=True)
class ImportBatch(Entity):
    filename: str
    status: BatchStatus = BatchStatus.PENDING
    summary: dict[str, Any] = field(default_factory=dict[str, Any])
    error_summary: dict[str, Any] | None = None
    imported_at: datetime | None = None
    properties_created_count: int = 0
    units_created_count: int = 0

    # Owned children
    _rows: list[StagedRow] = field(default_factory=list["StagedRow"], repr=False)

    def __post_init__(self) -> None:
        if not self.filename or not self.filename.strip():
            raise ValueError("filename must be provided")
        self.status = BatchStatus(self.status)

    @property
    def rows(self) -> tuple[StagedRow, ...]:
        return tuple(self._rows)

    @property
    def is_previewed(self) -> bool:
        return self.status == BatchStatus.PREVIEWED

    @property
    def errors(self) -> list[str]:
        if not self.error_summary:
            return []
        return list(self.error_summary.get("errors", []))

    # Commands (ownership here)
    def stage_row(
        self,
        record_type: RecordType,
        *,
        original: OriginalRow,
        parsed: PropertyFields,
    ) -> StagedRow:
        row = StagedRow(
            _batch=self,
            record_type=record_type,
            original=original,
            parsed=parsed,
            position=len(self._rows),
        )
        if row not in self._rows:
            self._rows.append(row)
        return row

    def mark_previewed(self, summary: dict[str, Any]) -> None:
        self.status = BatchStatus.PREVIEWED
        self.summary = dict(summary)
        self.error_summary = None

    def mark_imported(
        self,
        *,
        properties_created: Sequence[object],
        units_created: Sequence[object],
        at: datetime | None = None,
    ) -> None:
        self.status = BatchStatus.IMPORTED
        self.imported_at = at or utc_now()
        self.properties_created_count = len(properties_created)
        self.units_created_count = len(units_created)
        self.summary = {
            **self.summary,
            "import_results": {
                "properties_created": [str(item) for item in properties_created],
                "units_created": [str(item) for item in units_created],
            },
        }

    def mark_failed(self, errors: Sequence[str], *, results: dict[str, Any] | None = None) -> None:
        self.status = BatchStatus.FAILED
        error_summary: dict[str, Any] = {"errors": list(errors)}
        if results is not None:
            error_summary["results"] = results
        self.error_summary = error_summary


@dataclass(eq=False, kw_only=True)
class StagedRow(Entity):
    _batch: ImportBatch = field(repr=False)
    record_type: RecordType
    original: OriginalRow
    parsed: PropertyFields
    position: int = 0
    status: RowStatus = RowStatus.PENDING
    messages: list[str] = field(default_factory=list[str])
    existing_property: Property | None = None
    created_property: Property | None = None

    def __post_init__(self) -> None:
        self.record_type = RecordType(self.record_type)
        self.status = RowStatus(self.status)
        is_unit_fields = isinstance(self.parsed, UnitFields)
        if (self.record_type == RecordType.UNIT) != is_unit_fields:
            raise InvalidRecordError(
                f"{self.record_type} row cannot carry {type(self.parsed).__name__}"
            )

    @property
    def batch(self) -> ImportBatch:
        return self._batch

    @property
    def source_row_number(self) -> int:
        return self.original.source_row_number

    @property
    def building_name(self) -> str | None:
        return self.parsed.building_name

    @property
    def unit_number(self) -> str | None:
        if isinstance(self.parsed, UnitFields):
            return self.parsed.unit_number
        return None

    @property
    def is_property(self) -> bool:
        return self.record_type == RecordType.PROPERTY

    @property
    def is_unit(self) -> bool:
        return self.record_type == RecordType.UNIT

    @property
    def error_text(self) -> str | None:
        """Messages joined the way they are shown to the user, ``None`` when clean."""
        if not self.messages:
            return None
        return MESSAGE_SEPARATOR.join(self.messages)

    def reset(self) -> None:
        self.status = RowStatus.PENDING
        self.messages = []
        self.existing_property = None

    def link_existing(self, existing: Property) -> None:
        self.existing_property = existing

    def record_validation(self, messages: Iterable[str]) -> None:
        collected = list(messages)
        self.messages = collected
        self.status = RowStatus.REJECTED if collected else RowStatus.VERIFIED

    def mark_imported(self, *, created_property: Property | None = None) -> None:
        if self.status != RowStatus.VERIFIED:
            raise ValueError(f"only verified rows can be imported, row is {self.status}")
        if created_property is not None:
            self.created_property = created_property
        self.status = RowStatus.IMPORTED


# Filters over staged rows ----------------------------------------------------


def property_rows(rows: Iterable[StagedRow]) -> list[StagedRow]:
    return [row for row in rows if row.record_type == RecordType.PROPERTY]


def unit_rows(rows: Iterable[StagedRow]) -> list[StagedRow]:
    return [row for row in rows if row.record_type == RecordType.UNIT]


def with_status(rows: Iterable[StagedRow], status: RowStatus) -> list[StagedRow]:
    return [row for row in rows if row.status == status]


def verified(rows: Iterable[StagedRow]) -> list[StagedRow]:
    return with_status(rows, RowStatus.VERIFIED)


def rejected(rows: Iterable[StagedRow]) -> list[StagedRow]:
    return with_status(rows, RowStatus.REJECTED)


def pending(rows: Iterable[StagedRow]) -> list[StagedRow]:
    return with_status(rows, RowStatus.PENDING)
