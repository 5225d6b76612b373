from __future__ import annotations

from property_importer.domain.import_pipeline import (
    ImportRowBuilder,
    PipelineContext,
    RawRow,
    building_key,
    ingest_rows,
    parse_property_fields,
    parse_unit_fields,
    stage_rows,
)
from property_importer.domain.model import (
    ImportBatch,
    PropertyFields,
    RecordType,
    RowStatus,
    UnitFields,
)
from property_importer.domain.ports import ImportRepositories
from tests.helpers.imports import FakeStagedRowRepository, make_row, make_table


def _raw(*rows: list[str]) -> list[RawRow]:
    return ingest_rows(make_table(*rows))


def test_parse_fields_normalise_each_cell() -> None:
    (raw,) = _raw(
        make_row(" Ave Apts Apt 2", "123  Main St.", "Apt. 02", "springfield", "il", "62701.0")
    )

    assert parse_property_fields(raw.values) == PropertyFields(
        building_name="Ave Apts",
        street_address="123 Main St",
        city="Springfield",
        state="Il",
        zip_code="62701",
    )
    assert parse_unit_fields(raw.values) == UnitFields(
        building_name="Ave Apts",
        street_address="123 Main St",
        city="Springfield",
        state="Il",
        zip_code="62701",
        unit_number="2",
    )


def test_building_key_drops_blank_fields() -> None:
    fields = PropertyFields(building_name="Ave Apts", city="Springfield", zip_code="62701")

    assert building_key(fields) == "Ave Apts|Springfield|62701"


def test_one_property_row_per_distinct_building_key() -> None:
    raw_rows = _raw(
        make_row("Ave Apts", "123 Main St", "1", "Springfield", "IL", "62701"),
        make_row("Ave Apts Unit 2", "123 Main St.", "2", "springfield", "IL", "62701"),
        make_row("Oak House", "9 Oak Ave", "", "Springfield", "IL", "62702"),
        make_row("Ave Apts", "500 Other Rd", "3", "Springfield", "IL", "62703"),
        make_row("Ave Apts", "123 Main St", "1", "Springfield", "IL", "62701"),
    )
    batch = ImportBatch(filename="upload.csv")

    staged = stage_rows(batch, raw_rows)

    keys = {building_key(parse_property_fields(raw.values)) for raw in raw_rows}
    properties = [row for row in staged if row.record_type == RecordType.PROPERTY]
    units = [row for row in staged if row.record_type == RecordType.UNIT]
    assert len(properties) == len(keys) == 3
    assert [row.source_row_number for row in properties] == [2, 4, 5]
    # unit rows are not deduplicated
    assert [row.unit_number for row in units] == ["1", "2", "3", "1"]
    assert all(row.status == RowStatus.PENDING for row in staged)
    assert [row.position for row in batch.rows] == list(range(len(staged)))
    assert units[1].original.get("Building Name") == "Ave Apts Unit 2"


def test_unit_suffix_spellings_stage_one_building() -> None:
    raw_rows = _raw(
        make_row("Maple Court Apt 1", "9 Oak Ave", "1", "Springfield", "IL", "62702"),
        make_row("Maple Court Apt.2", "9 Oak Ave", "2", "Springfield", "IL", "62702"),
    )

    staged = stage_rows(ImportBatch(filename="upload.csv"), raw_rows)

    properties = [row for row in staged if row.record_type == RecordType.PROPERTY]
    assert [row.building_name for row in properties] == ["Maple Court"]


def test_import_row_builder_registers_rows(repositories: ImportRepositories) -> None:
    batch = ImportBatch(filename="upload.csv")
    context = PipelineContext(
        repositories=repositories,
        raw_rows=_raw(
            make_row("Ave Apts", "123 Main St", "1", "Springfield", "IL", "62701"),
            make_row("Ave Apts", "123 Main St", "2", "Springfield", "IL", "62701"),
        ),
    )

    ImportRowBuilder().run(batch, context=context)

    staged_rows = repositories.staged_rows
    assert isinstance(staged_rows, FakeStagedRowRepository)
    assert staged_rows.items == list(batch.rows)
    assert context.counters.property_rows == 1
    assert context.counters.unit_rows == 2
