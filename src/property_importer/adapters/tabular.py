"""Read CSV and Excel workbooks into plain tables of string cells."""

from __future__ import annotations

import csv
from logging import getLogger
from typing import TYPE_CHECKING, Final

from openpyxl import load_workbook

from property_importer.domain.errors import PropertyImportError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

CSV_SUFFIXES: Final = frozenset({".csv"})
EXCEL_SUFFIXES: Final = frozenset({".xlsx", ".xlsm"})
SUPPORTED_SUFFIXES: Final = CSV_SUFFIXES | EXCEL_SUFFIXES


class UnsupportedFileError(PropertyImportError):
    """Raised for files that are neither CSV nor an Excel workbook."""


def _stringify(value: object) -> str:
    # floats keep their repr ("12.0") so the normaliser can drop the artefact
    if value is None:
        return ""
    return str(value)


def read_csv(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return [list(row) for row in csv.reader(handle)]


def read_workbook(path: Path) -> list[list[str]]:
    """Read the first worksheet of ``path``, computed values only."""

    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [
            [_stringify(value) for value in row] for row in sheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()


def read_table(path: Path) -> list[list[str]]:
    """Load ``path`` as a table whose first row holds the headers."""

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        table = read_csv(path)
    elif suffix in EXCEL_SUFFIXES:
        table = read_workbook(path)
    else:
        supported = ", ".join(sorted(SUPPORTED_SUFFIXES))
        raise UnsupportedFileError(f"Unsupported file type '{path.suffix}' (expected {supported})")
    log.debug("Read %s rows from %s", len(table), path)
    return table
