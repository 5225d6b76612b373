"""Ingestion phase: turn a raw cell table into keyed row records."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final

from property_importer.domain.errors import MissingHeadersError
from property_importer.domain.import_pipeline.context import RawRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from property_importer.domain.import_pipeline.context import CellTable, PipelineContext
    from property_importer.domain.model import ImportBatch

log = getLogger(__name__)


class Header(StrEnum):
    BUILDING_NAME = "Building Name"
    STREET_ADDRESS = "Street Address"
    UNIT = "Unit"
    CITY = "City"
    STATE = "State"
    ZIP_CODE = "Zip Code"


REQUIRED_HEADERS: Final[tuple[str, ...]] = tuple(header.value for header in Header)


def _cell(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def missing_headers(headers: Iterable[str]) -> list[str]:
    """Return the required headers absent from ``headers``, in required order."""

    present = set(headers)
    return [header for header in REQUIRED_HEADERS if header not in present]


def ingest_rows(table: CellTable) -> list[RawRow]:
    """Read ``table`` (row 1 = headers) into ``RawRow`` records.

    Rows whose every value is blank are skipped. Source row numbers are
    1-based and count the header row, so the first data row is row 2.
    """

    if not table:
        raise MissingHeadersError(REQUIRED_HEADERS)

    headers = [_cell(value) for value in table[0]]
    missing = missing_headers(headers)
    if missing:
        raise MissingHeadersError(missing)

    rows: list[RawRow] = []
    for offset, cells in enumerate(table[1:], start=2):
        values = _row_values(headers, cells)
        if any(values.values()):
            rows.append(RawRow(values=values, source_row_number=offset))
    return rows


def _row_values(headers: Sequence[str], cells: Sequence[str | None]) -> dict[str, str]:
    values: dict[str, str] = {}
    for index, header in enumerate(headers):
        if not header:
            continue
        values[header] = _cell(cells[index]) if index < len(cells) else ""
    return values


class RowIngester:
    """Reads the batch's cell table and validates its header row."""

    name: str = "ingestion"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        if context.table_source is None:
            raise RuntimeError("Ingestion requires a table source")
        context.raw_rows = ingest_rows(context.table_source())
        context.counters.ingested_rows = len(context.raw_rows)
        log.info("Ingested %s data rows for %s", len(context.raw_rows), batch.filename)
