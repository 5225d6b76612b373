from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from property_importer.domain.errors import CommitError
from property_importer.domain.import_pipeline import (
    CommitResults,
    ImportCommitter,
    build_summary,
    ingest_rows,
    stage_rows,
    validate,
)
from property_importer.domain.model import (
    BatchStatus,
    ImportBatch,
    PropertyType,
    RowStatus,
    property_rows,
    unit_rows,
)
from tests.helpers.imports import (
    FakePropertyRepository,
    FakeStagedRowRepository,
    FakeUnitRepository,
    make_property,
    make_repositories,
    make_row,
    make_table,
)

if TYPE_CHECKING:
    from property_importer.domain.ports import ImportRepositories, PropertyRepository


def _previewed(properties: PropertyRepository, *rows: list[str]) -> ImportBatch:
    batch = ImportBatch(filename="upload.csv")
    stage_rows(batch, ingest_rows(make_table(*rows)))
    validate(batch.rows, properties)
    batch.mark_previewed(build_summary(batch.rows))
    return batch


def _main_st(building: str, unit: str = "") -> list[str]:
    return make_row(building, "123 Main St", unit, "Springfield", "IL", "62701")


def test_commit_creates_multi_family_property_with_units() -> None:
    repositories = make_repositories()
    batch = _previewed(
        repositories.properties, _main_st("Ave Apts", "1"), _main_st("Ave Apts", "2")
    )

    results = ImportCommitter(repositories).commit(batch)

    assert isinstance(repositories.properties, FakePropertyRepository)
    assert isinstance(repositories.units, FakeUnitRepository)
    (created,) = repositories.properties.items
    assert created.building_name == "Ave Apts"
    assert created.property_type == PropertyType.MULTI_FAMILY
    assert created.address.state == "Illinois"
    assert [unit.unit_number for unit in created.units] == ["1", "2"]
    assert len(repositories.units.items) == 2
    assert results.properties_created == [created.id]
    assert results.units_created == [unit.id for unit in created.units]
    assert {row.status for row in batch.rows} == {RowStatus.IMPORTED}
    assert property_rows(batch.rows)[0].created_property is created


def test_single_verified_unit_makes_property_multi_family() -> None:
    repositories = make_repositories()
    batch = _previewed(repositories.properties, _main_st("Ave Apts", "1"))

    ImportCommitter(repositories).commit(batch)

    (created,) = repositories.properties.items
    assert created.property_type == PropertyType.MULTI_FAMILY
    assert [unit.unit_number for unit in created.units] == ["1"]


def test_rejected_unit_leaves_property_single_family() -> None:
    repositories = make_repositories()
    batch = _previewed(
        repositories.properties,
        _main_st("Ave Apts"),
        make_row("Ave Apts", "500 Other Rd", "1", "Springfield", "IL", "62701"),
    )
    (unit_row,) = unit_rows(batch.rows)
    assert unit_row.status == RowStatus.REJECTED

    ImportCommitter(repositories).commit(batch)

    (created,) = repositories.properties.items
    assert created.property_type == PropertyType.SINGLE_FAMILY
    assert created.units == ()


def test_commit_attaches_units_to_existing_property() -> None:
    existing = make_property("Ave Apts")
    repositories = make_repositories([existing])
    batch = _previewed(
        repositories.properties,
        _main_st("Ave Apts", "1"),
        make_row("Maple Court", "9 Oak Ave", "", "Springfield", "IL", "62702"),
        make_row("Bad Bldg", "1 Elm St", "", "", "IL", "62703"),
    )

    results = ImportCommitter(repositories).commit(batch)

    assert isinstance(repositories.staged_rows, FakeStagedRowRepository)
    assert [unit.unit_number for unit in existing.units] == ["1"]
    assert len(results.properties_created) == 1
    assert len(results.units_created) == 1
    assert repositories.staged_rows.status_updates == [(1, RowStatus.IMPORTED)]

    linked, new, bad = property_rows(batch.rows)
    assert linked.status == RowStatus.IMPORTED
    assert linked.created_property is None
    assert new.created_property is not None
    assert new.created_property.property_type == PropertyType.SINGLE_FAMILY
    assert bad.status == RowStatus.REJECTED


def test_commit_marks_batch_imported() -> None:
    repositories = make_repositories()
    batch = _previewed(repositories.properties, _main_st("Ave Apts", "1"))

    results = ImportCommitter(repositories).commit(batch)

    assert batch.status == BatchStatus.IMPORTED
    assert batch.imported_at is not None
    assert batch.properties_created_count == 1
    assert batch.units_created_count == 1
    assert batch.summary["import_results"] == results.as_dict()
    assert batch.summary["total_rows"] == 2


def test_missing_parent_raises_and_keeps_partial_results() -> None:
    validated_against = FakePropertyRepository([make_property("Ave Apts")])
    batch = _previewed(
        validated_against,
        make_row("Maple Court", "9 Oak Ave", "", "Springfield", "IL", "62702"),
        _main_st("Ave Apts", "1"),
    )
    repositories: ImportRepositories = make_repositories()
    results = CommitResults()

    with pytest.raises(CommitError, match="Building 'Ave Apts' not found for unit 1"):
        ImportCommitter(repositories).commit(batch, results=results)

    assert len(results.properties_created) == 1
    assert results.units_created == []
    assert batch.status == BatchStatus.PREVIEWED


def test_commit_results_as_dict_uses_strings() -> None:
    property_ = make_property()
    results = CommitResults(properties_created=[property_.id])

    assert results.as_dict() == {
        "properties_created": [str(property_.id)],
        "units_created": [],
    }
