from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from property_importer import main as main_module
from property_importer.app import BatchReport, RowReport
from property_importer.config import ConfigurationError
from property_importer.domain.import_pipeline import CommitResult, PreviewResult
from property_importer.domain.model import BatchStatus, RecordType, RowStatus

if TYPE_CHECKING:
    from pathlib import Path

BATCH_ID = uuid4()

SUMMARY = {
    "total_rows": 3,
    "verified_rows": 2,
    "rejected_rows": 1,
    "new_properties": 1,
    "existing_properties": 0,
}


@pytest.fixture(autouse=True)
def logging_levels(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    levels: list[int] = []

    def fake_configure_logging(*, level: int, force: bool) -> None:
        _ = force
        levels.append(level)

    monkeypatch.setattr(main_module, "configure_logging", fake_configure_logging)
    return levels


def _report(*rows: RowReport) -> BatchReport:
    return BatchReport(
        batch_id=BATCH_ID,
        filename="upload.csv",
        status=BatchStatus.PREVIEWED,
        created_at=datetime(2026, 3, 1, 9, 30, tzinfo=UTC),
        imported_at=None,
        summary=SUMMARY,
        errors=(),
        rows=rows,
    )


def test_preview_prints_summary(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    logging_levels: list[int],
) -> None:
    path = tmp_path / "upload.csv"
    path.write_text("", encoding="utf-8")
    seen: list[Path] = []

    def fake_preview(file: Path) -> PreviewResult:
        seen.append(file)
        return PreviewResult(
            batch_id=BATCH_ID, ok=True, status=BatchStatus.PREVIEWED, summary=SUMMARY
        )

    monkeypatch.setattr(main_module, "preview_file", fake_preview)

    main_module.main(["--verbose", "preview", str(path)])

    out = capsys.readouterr().out
    assert seen == [path]
    assert f"Batch {BATCH_ID}: previewed" in out
    assert "3 rows staged: 2 verified, 1 rejected" in out
    assert logging_levels == [logging.DEBUG]


def test_preview_of_missing_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["preview", str(tmp_path / "missing.csv")])

    assert excinfo.value.code == 2


def test_failed_preview_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    path = tmp_path / "upload.csv"
    path.write_text("", encoding="utf-8")

    def fake_preview(file: Path) -> PreviewResult:
        _ = file
        return PreviewResult(
            batch_id=BATCH_ID,
            ok=False,
            status=BatchStatus.FAILED,
            errors=("Missing required columns: Unit",),
        )

    monkeypatch.setattr(main_module, "preview_file", fake_preview)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["preview", str(path)])

    assert excinfo.value.code == 1
    assert "error: Missing required columns: Unit" in capsys.readouterr().out


def test_commit_prints_created_counts(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    logging_levels: list[int],
) -> None:
    def fake_commit(batch_id: object) -> CommitResult:
        assert batch_id == BATCH_ID
        return CommitResult(
            batch_id=BATCH_ID,
            ok=True,
            status=BatchStatus.IMPORTED,
            properties_created=(uuid4(),),
            units_created=(uuid4(), uuid4()),
        )

    monkeypatch.setattr(main_module, "commit_import", fake_commit)

    main_module.main(["commit", str(BATCH_ID)])

    assert "created 1 properties and 2 units" in capsys.readouterr().out
    assert logging_levels == [logging.INFO]


def test_invalid_batch_id_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["commit", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_show_can_filter_rejected_rows(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    rows = (
        RowReport(
            source_row_number=2,
            record_type=RecordType.PROPERTY,
            status=RowStatus.VERIFIED,
            building_name="Ave Apts",
            unit_number=None,
            messages=(),
        ),
        RowReport(
            source_row_number=3,
            record_type=RecordType.UNIT,
            status=RowStatus.REJECTED,
            building_name="Ave Apts",
            unit_number="1",
            messages=("Unit 1 for building 'Ave Apts' appears multiple times in import file",),
        ),
    )
    monkeypatch.setattr(main_module, "describe_batch", lambda batch_id: _report(*rows))

    main_module.main(["show", str(BATCH_ID), "--rejected-only"])

    out = capsys.readouterr().out
    assert "row 2" not in out
    assert "row 3 [unit] Ave Apts - Unit 1: rejected" in out
    assert "- Unit 1 for building 'Ave Apts' appears multiple times in import file" in out


def test_list_prints_batches(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    limits: list[int] = []

    def fake_list(*, limit: int) -> list[BatchReport]:
        limits.append(limit)
        return [_report()]

    monkeypatch.setattr(main_module, "list_batches", fake_list)

    main_module.main(["list", "--limit", "5"])

    assert limits == [5]
    assert f"{BATCH_ID}  2026-03-01 09:30  previewed  upload.csv" in capsys.readouterr().out


def test_list_rejects_non_positive_limit() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["list", "--limit", "0"])

    assert excinfo.value.code == 2


def test_unexpected_errors_exit_non_zero(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_list(*, limit: int) -> list[BatchReport]:
        _ = limit
        raise RuntimeError("database is locked")

    monkeypatch.setattr(main_module, "list_batches", fake_list)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["list"])

    assert excinfo.value.code == 1
    assert "Error: database is locked" in capsys.readouterr().err


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--version"])

    assert excinfo.value.code == 0
    assert main_module.__version__ in capsys.readouterr().out


def test_configuration_errors_name_the_setting(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_list(*, limit: int) -> list[BatchReport]:
        _ = limit
        raise ConfigurationError("Database URI must include a scheme", setting="DATABASE_URI")

    monkeypatch.setattr(main_module, "list_batches", fake_list)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["list"])

    assert excinfo.value.code == 2
    assert "(check DATABASE_URI)" in capsys.readouterr().err
