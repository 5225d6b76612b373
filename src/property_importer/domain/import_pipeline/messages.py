"""User-facing validation messages attached to rejected staged rows."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from property_importer.domain.model import Address, Property, StagedRow

BUILDING_NAME_REQUIRED = "Building name is required"
STREET_ADDRESS_REQUIRED = "Street address is required"
CITY_REQUIRED = "City is required"
STATE_REQUIRED = "State is required"
ZIP_CODE_REQUIRED = "ZIP code is required"
UNIT_NUMBER_REQUIRED = "Unit number is required"


def invalid_state(state: str) -> str:
    return f"'{state}' is not a valid US state"


def building_name_conflict(building_name: str, existing: Property) -> str:
    return (
        f"Building name '{building_name}' already exists in database "
        f"with different address: {existing.full_address}"
    )


def building_name_import_conflict(building_name: str, other: StagedRow) -> str:
    return (
        f"Building name '{building_name}' appears at row {other.source_row_number} "
        f"with address: {other.parsed.address}"
    )


def address_conflict(existing: Property) -> str:
    return f"This address already belongs to building '{existing.building_name}'"


def duplicate_address(other: StagedRow) -> str:
    return f"This address is duplicated in import file (see row {other.source_row_number})"


def parent_property_missing(building_name: str) -> str:
    return f"Building '{building_name}' not found in database or import file"


def parent_property_invalid(building_name: str) -> str:
    return f"Cannot add unit - building '{building_name}' has validation errors"


def address_field_mismatch(
    field_label: str,
    building_name: str,
    expected: str | None,
    actual: str | None,
) -> str:
    return (
        f"{field_label} should be '{expected or ''}' for building '{building_name}' "
        f"(found '{actual or ''}')"
    )


def duplicate_unit(unit_number: str, building_name: str) -> str:
    return (
        f"Unit {unit_number} for building '{building_name}' appears multiple times in import file"
    )


def existing_unit(unit_number: str, building_name: str) -> str:
    return f"Unit {unit_number} already exists for building '{building_name}' in database"


def address_fields(expected: Address, actual: Address) -> list[tuple[str, str | None, str | None]]:
    """Pair up address fields as ``(label, expected, actual)`` in display order."""

    return [
        ("Street address", expected.street_address, actual.street_address),
        ("City", expected.city, actual.city),
        ("State", expected.state, actual.state),
        ("ZIP code", expected.zip_code, actual.zip_code),
    ]
