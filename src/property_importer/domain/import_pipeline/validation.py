"""Validation phase: cross-check staged rows against the store and each other.

Property rows are validated first, then unit rows, each in staging order.
Every row's messages are recomputed from scratch, so running the validator
twice over the same rows and store yields the same statuses. A row that is
compared against "other verified rows" only ever sees rows verified earlier in
the same sweep: the first occurrence of a building or unit wins.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from property_importer.domain.import_pipeline import messages
from property_importer.domain.model import (
    Address,
    RowStatus,
    UnitFields,
    lookup_state,
    property_rows,
    unit_rows,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from property_importer.domain.import_pipeline.context import PipelineContext
    from property_importer.domain.model import ImportBatch, Property, PropertyFields, StagedRow
    from property_importer.domain.ports import PropertyRepository

log = getLogger(__name__)


def required_field_messages(fields: PropertyFields) -> list[str]:
    found: list[str] = []
    if not fields.building_name:
        found.append(messages.BUILDING_NAME_REQUIRED)
    if not fields.street_address:
        found.append(messages.STREET_ADDRESS_REQUIRED)
    if not fields.city:
        found.append(messages.CITY_REQUIRED)
    if not fields.state:
        found.append(messages.STATE_REQUIRED)
    if not fields.zip_code:
        found.append(messages.ZIP_CODE_REQUIRED)
    if isinstance(fields, UnitFields) and not fields.unit_number:
        found.append(messages.UNIT_NUMBER_REQUIRED)
    return found


def _address(fields: PropertyFields) -> Address:
    return fields.address.normalized()


class _PropertySweep:
    def __init__(self, properties: PropertyRepository) -> None:
        self.properties = properties
        self.accepted: list[StagedRow] = []

    def check(self, row: StagedRow) -> list[str]:
        fields = row.parsed
        found = required_field_messages(fields)
        if fields.state and lookup_state(fields.state) is None:
            found.append(messages.invalid_state(fields.state))

        address = _address(fields)
        name = fields.building_name
        if name:
            exact = self.properties.find_exact(name, address) if address.is_complete else None
            if exact is not None:
                row.link_existing(exact)
                return found
            name_conflict = self._check_name(row, name, address, found)
            if name_conflict:
                return found

        if address.is_complete:
            self._check_address(row, name, address, found)
        return found

    def _check_name(self, row: StagedRow, name: str, address: Address, found: list[str]) -> bool:
        name_conflict = False
        existing = self.properties.get_by_name(name)
        if existing is not None and existing.address != address:
            found.append(messages.building_name_conflict(name, existing))
            name_conflict = True

        other = next(
            (
                other
                for other in self.accepted
                if other is not row
                and other.building_name == name
                and _address(other.parsed) != address
            ),
            None,
        )
        if other is not None:
            found.append(messages.building_name_import_conflict(name, other))
            name_conflict = True
        return name_conflict

    def _check_address(
        self,
        row: StagedRow,
        name: str | None,
        address: Address,
        found: list[str],
    ) -> None:
        existing = self.properties.get_by_address(address)
        if existing is not None and existing.building_name != name:
            found.append(messages.address_conflict(existing))

        other = next(
            (
                other
                for other in self.accepted
                if other is not row and _address(other.parsed) == address
            ),
            None,
        )
        if other is not None:
            found.append(messages.duplicate_address(other))

    def record(self, row: StagedRow, found: list[str]) -> None:
        row.record_validation(found)
        if row.status == RowStatus.VERIFIED:
            self.accepted.append(row)


class _UnitSweep:
    def __init__(
        self, properties: PropertyRepository, staged_properties: Sequence[StagedRow]
    ) -> None:
        self.properties = properties
        self.staged_properties = staged_properties
        self.accepted: list[StagedRow] = []

    def _staged_parent(self, name: str) -> StagedRow | None:
        return next((row for row in self.staged_properties if row.building_name == name), None)

    def check(self, row: StagedRow) -> list[str]:
        fields = row.parsed
        found = required_field_messages(fields)
        name = fields.building_name
        if not name:
            return found

        staged = self._staged_parent(name)
        canonical = self.properties.get_by_name(name)
        if canonical is None and staged is None:
            found.append(messages.parent_property_missing(name))
        elif staged is not None and staged.status == RowStatus.REJECTED:
            found.append(messages.parent_property_invalid(name))
            return found
        else:
            self._check_parent_address(row, name, canonical, staged, found)

        unit_number = row.unit_number
        if unit_number:
            self._check_duplicates(row, name, unit_number, canonical, found)
        return found

    def _check_parent_address(
        self,
        row: StagedRow,
        name: str,
        canonical: Property | None,
        staged: StagedRow | None,
        found: list[str],
    ) -> None:
        if canonical is not None:
            expected = canonical.address
        elif staged is not None and staged.existing_property is not None:
            expected = staged.existing_property.address
        elif staged is not None:
            expected = _address(staged.parsed)
        else:
            return

        actual = row.parsed.address
        # compare on canonical state spelling, report the staged value
        compared = messages.address_fields(expected, actual.normalized())
        reported = messages.address_fields(expected, actual)
        for (label, want, got), (_, _, raw) in zip(compared, reported, strict=True):
            if want == got:
                continue
            found.append(messages.address_field_mismatch(label, name, want, raw))

    def _check_duplicates(
        self,
        row: StagedRow,
        name: str,
        unit_number: str,
        canonical: Property | None,
        found: list[str],
    ) -> None:
        repeated = any(
            other is not row and other.building_name == name and other.unit_number == unit_number
            for other in self.accepted
        )
        if repeated:
            found.append(messages.duplicate_unit(unit_number, name))
        if canonical is not None and self.properties.has_unit(canonical, unit_number):
            found.append(messages.existing_unit(unit_number, name))

    def record(self, row: StagedRow, found: list[str]) -> None:
        row.record_validation(found)
        if row.status == RowStatus.VERIFIED:
            self.accepted.append(row)


def validate(rows: Sequence[StagedRow], properties: PropertyRepository) -> None:
    """Assign a verified or rejected status, with messages, to every row."""

    for row in rows:
        row.reset()

    staged_properties = sorted(property_rows(rows), key=lambda row: row.position)
    property_sweep = _PropertySweep(properties)
    for row in staged_properties:
        property_sweep.record(row, property_sweep.check(row))

    unit_sweep = _UnitSweep(properties, staged_properties)
    for row in sorted(unit_rows(rows), key=lambda row: row.position):
        unit_sweep.record(row, unit_sweep.check(row))


class ConflictValidator:
    """Validates every staged row of the batch against the canonical store."""

    name: str = "validation"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        rows = batch.rows
        validate(rows, context.repositories.properties)

        verified = sum(1 for row in rows if row.status == RowStatus.VERIFIED)
        context.counters.verified_rows = verified
        context.counters.rejected_rows = len(rows) - verified
        log.info(
            "Validated %s rows for %s: %s verified, %s rejected",
            len(rows),
            batch.filename,
            verified,
            len(rows) - verified,
        )
