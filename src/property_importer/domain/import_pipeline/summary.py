"""Summary phase: condense the validated rows into the batch's preview summary."""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING, Any

from property_importer.domain.model import (
    RecordType,
    RowStatus,
    property_rows,
    rejected,
    unit_rows,
    verified,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from property_importer.domain.import_pipeline.context import PipelineContext
    from property_importer.domain.model import ImportBatch, StagedRow

log = getLogger(__name__)


def build_summary(rows: Sequence[StagedRow]) -> dict[str, Any]:
    """Return the JSON-ready preview summary for ``rows``.

    ``by_status`` and ``by_record_type`` only list values that occur.
    ``property_breakdown`` covers verified property rows; its ``unit_count``
    counts the verified unit rows naming the same building. Rows that spell one
    existing building differently all link to it and count it once, so
    ``new_properties + existing_properties`` equals the number of breakdown entries.
    """

    properties = property_rows(rows)
    units = unit_rows(rows)
    verified_properties = verified(properties)
    verified_units = verified(units)

    statuses = Counter(row.status for row in rows)
    record_types = Counter(row.record_type for row in rows)

    return {
        "total_rows": len(rows),
        "by_status": {str(status): statuses[status] for status in RowStatus if statuses[status]},
        "by_record_type": {
            str(record_type): record_types[record_type]
            for record_type in RecordType
            if record_types[record_type]
        },
        "properties": len(properties),
        "units": len(units),
        "verified_rows": len(verified(rows)),
        "rejected_rows": len(rejected(rows)),
        "new_properties": sum(1 for row in verified_properties if row.existing_property is None),
        "existing_properties": len(
            {row.existing_property.id for row in verified_properties if row.existing_property}
        ),
        "property_breakdown": {
            row.building_name: {
                "address": row.parsed.street_address,
                "city": row.parsed.city,
                "state": row.parsed.state,
                "zip": row.parsed.zip_code,
                "unit_count": sum(
                    1 for unit in verified_units if unit.building_name == row.building_name
                ),
                "is_new": row.existing_property is None,
            }
            for row in verified_properties
        },
    }


class SummaryBuilder:
    """Stores the preview summary on the batch and marks it previewed."""

    name: str = "summary"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        summary = build_summary(batch.rows)
        batch.mark_previewed(summary)
        log.info(
            "Previewed %s: %s verified, %s rejected",
            batch.filename,
            summary["verified_rows"],
            summary["rejected_rows"],
        )
