"""Commit phase: materialise the verified rows of a previewed batch.

The committer only mutates domain objects and repositories; the caller owns
the unit of work, commits it on success and rolls it back on any error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from property_importer.domain.errors import CommitError
from property_importer.domain.model import (
    Property,
    PropertyType,
    RowStatus,
    property_rows,
    unit_rows,
    verified,
)

if TYPE_CHECKING:
    from uuid import UUID

    from property_importer.domain.model import ImportBatch, StagedRow, Unit
    from property_importer.domain.ports import ImportRepositories

log = getLogger(__name__)


@dataclass(slots=True)
class CommitResults:
    """Ids of the records created so far; kept on failure as partial results."""

    properties_created: list[UUID] = field(default_factory=list["UUID"])
    units_created: list[UUID] = field(default_factory=list["UUID"])

    def as_dict(self) -> dict[str, Any]:
        return {
            "properties_created": [str(item) for item in self.properties_created],
            "units_created": [str(item) for item in self.units_created],
        }


def property_type_for(row: StagedRow, verified_units: list[StagedRow]) -> PropertyType:
    """Multi-family when at least one verified unit row names the building."""

    if any(unit.building_name == row.building_name for unit in verified_units):
        return PropertyType.MULTI_FAMILY
    return PropertyType.SINGLE_FAMILY


class ImportCommitter:
    """Creates properties and units for the verified rows of one batch."""

    def __init__(self, repositories: ImportRepositories) -> None:
        self.repositories = repositories

    def commit(self, batch: ImportBatch, *, results: CommitResults | None = None) -> CommitResults:
        """Apply ``batch`` to the canonical store, recording created ids in ``results``."""

        results = results if results is not None else CommitResults()
        rows = batch.rows
        verified_properties = verified(property_rows(rows))
        verified_units = verified(unit_rows(rows))

        created = self._create_properties(verified_properties, verified_units, results)
        self._mark_existing(verified_properties)
        self._create_units(verified_units, created, results)

        batch.mark_imported(
            properties_created=results.properties_created,
            units_created=results.units_created,
        )
        log.info(
            "Committed %s: %s properties and %s units created",
            batch.filename,
            len(results.properties_created),
            len(results.units_created),
        )
        return results

    def _create_properties(
        self,
        verified_properties: list[StagedRow],
        verified_units: list[StagedRow],
        results: CommitResults,
    ) -> dict[str, Property]:
        created: dict[str, Property] = {}
        for row in verified_properties:
            if row.existing_property is not None:
                continue
            if not row.building_name:
                raise CommitError(f"Row {row.source_row_number} has no building name")
            property_ = Property(
                building_name=row.building_name,
                address=row.parsed.address,
                property_type=property_type_for(row, verified_units),
            )
            self.repositories.properties.add(property_)
            created[row.building_name] = property_
            row.mark_imported(created_property=property_)
            results.properties_created.append(property_.id)
        return created

    def _mark_existing(self, verified_properties: list[StagedRow]) -> None:
        existing = [row for row in verified_properties if row.existing_property is not None]
        if existing:
            self.repositories.staged_rows.update_status(existing, RowStatus.IMPORTED)

    def _create_units(
        self,
        verified_units: list[StagedRow],
        created: dict[str, Property],
        results: CommitResults,
    ) -> None:
        for row in verified_units:
            unit = self._create_unit(row, created)
            self.repositories.units.add(unit)
            row.mark_imported()
            results.units_created.append(unit.id)

    def _create_unit(self, row: StagedRow, created: dict[str, Property]) -> Unit:
        name = row.building_name
        unit_number = row.unit_number
        if not name or not unit_number:
            raise CommitError(f"Row {row.source_row_number} is missing its building or unit")
        parent = (
            created.get(name)
            or self.repositories.properties.get_by_name(name)
            or row.existing_property
        )
        if parent is None:
            raise CommitError(f"Building '{name}' not found for unit {unit_number}")
        return parent.add_unit(unit_number)
