from __future__ import annotations

from typing import TYPE_CHECKING

from property_importer.app import commit_import, describe_batch, preview_table
from property_importer.domain.model import Address, BatchStatus, Property, PropertyType, RowStatus
from tests.helpers.imports import make_property, make_row, make_table

if TYPE_CHECKING:
    from collections.abc import Callable

    from property_importer.adapters.sqlalchemy.unit_of_work import SqlAlchemyImportUnitOfWork

    type Factory = Callable[[], SqlAlchemyImportUnitOfWork]

MAIN_ST = Address("123 Main St", "Springfield", "Illinois", "62701")

TABLE = make_table(
    make_row("Ave Apts", "123 Main St", "Apt 1", "springfield", "IL", "62701"),
    make_row("Ave Apts", "123 Main St", "2.0", "Springfield", "il", "62701.0"),
    make_row("Maple Court", "9 Oak Ave", "", "Springfield", "Illinois", "62702"),
    make_row("Broken", "1 Elm St", "", "Springfield", "Atlantis", "62703"),
)


def _property(factory: Factory, name: str) -> Property | None:
    with factory() as uow:
        return uow.repositories.properties.get_by_name(name)


def _unit_numbers(factory: Factory, name: str) -> list[str]:
    with factory() as uow:
        property_ = uow.repositories.properties.get_by_name(name)
        assert property_ is not None
        return [unit.unit_number for unit in property_.units]


def test_preview_and_commit_against_sqlite(sqlite_unit_of_work: Factory) -> None:
    preview = preview_table("upload.csv", TABLE, unit_of_work_factory=sqlite_unit_of_work)

    assert preview.ok
    assert preview.summary["verified_rows"] == 4
    assert preview.summary["rejected_rows"] == 1
    assert _property(sqlite_unit_of_work, "Ave Apts") is None

    committed = commit_import(preview.batch_id, unit_of_work_factory=sqlite_unit_of_work)

    assert committed.ok
    assert len(committed.properties_created) == 2
    assert len(committed.units_created) == 2

    with sqlite_unit_of_work() as uow:
        properties = uow.repositories.properties
        ave = properties.get_by_name("Ave Apts")
        assert ave is not None
        assert ave.address == MAIN_ST
        assert ave.property_type == PropertyType.MULTI_FAMILY
        assert [unit.unit_number for unit in ave.units] == ["1", "2"]
        maple = properties.get_by_name("Maple Court")
        assert maple is not None
        assert maple.property_type == PropertyType.SINGLE_FAMILY
        assert properties.get_by_name("Broken") is None

    report = describe_batch(preview.batch_id, unit_of_work_factory=sqlite_unit_of_work)
    assert report.status == BatchStatus.IMPORTED
    assert [row.status for row in report.rows].count(RowStatus.IMPORTED) == 4
    assert [row.status for row in report.rows].count(RowStatus.REJECTED) == 1


def test_reimport_links_existing_buildings(sqlite_unit_of_work: Factory) -> None:
    first = preview_table("first.csv", TABLE, unit_of_work_factory=sqlite_unit_of_work)
    commit_import(first.batch_id, unit_of_work_factory=sqlite_unit_of_work)

    again = preview_table(
        "second.csv",
        make_table(
            make_row("Ave Apts", "123 Main St", "2", "Springfield", "IL", "62701"),
            make_row("Ave Apts", "123 Main St", "3", "Springfield", "IL", "62701"),
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert again.summary["existing_properties"] == 1
    assert again.summary["new_properties"] == 0
    report = describe_batch(again.batch_id, unit_of_work_factory=sqlite_unit_of_work)
    unit_messages = [row.messages for row in report.rows if row.unit_number]
    assert unit_messages == [
        ("Unit 2 already exists for building 'Ave Apts' in database",),
        (),
    ]

    committed = commit_import(again.batch_id, unit_of_work_factory=sqlite_unit_of_work)

    assert committed.ok
    assert committed.properties_created == ()
    assert len(committed.units_created) == 1
    assert _unit_numbers(sqlite_unit_of_work, "Ave Apts") == ["1", "2", "3"]


def test_conflicting_write_between_preview_and_commit_rolls_back(
    sqlite_unit_of_work: Factory,
) -> None:
    preview = preview_table(
        "upload.csv",
        make_table(
            make_row("Maple Court", "9 Oak Ave", "", "Springfield", "IL", "62702"),
            make_row("Ave Apts", "123 Main St", "1", "Springfield", "IL", "62701"),
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    with sqlite_unit_of_work() as uow:
        uow.repositories.properties.add(make_property("Ave Apts", street="500 Other Rd"))
        uow.commit()

    committed = commit_import(preview.batch_id, unit_of_work_factory=sqlite_unit_of_work)

    assert not committed.ok
    assert committed.status == BatchStatus.FAILED
    assert "UNIQUE constraint failed" in committed.errors[0]
    assert _property(sqlite_unit_of_work, "Maple Court") is None

    report = describe_batch(preview.batch_id, unit_of_work_factory=sqlite_unit_of_work)
    assert report.status == BatchStatus.FAILED
    assert {row.status for row in report.rows} == {RowStatus.VERIFIED}
    assert report.errors == committed.errors
