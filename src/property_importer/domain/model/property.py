"""Canonical property entities. Ownership lives on the property aggregate.

Aggregate roots here:
- Property owns its Units (1:n, unit label unique per property)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from property_importer.domain.errors import InvalidStateError
from property_importer.domain.model.base import Entity
from property_importer.domain.model.enums import PropertyType
from property_importer.domain.model.primitives import Address
from property_importer.domain.model.states import lookup_state


@dataclass(eq=False, kw_only=True)
class Property(Entity):
    building_name: str
    address: Address
    property_type: PropertyType = PropertyType.SINGLE_FAMILY

    # Owned children
    _units: list[Unit] = field(default_factory=list["Unit"], repr=False)

    def __post_init__(self) -> None:
        if not self.building_name or not self.building_name.strip():
            raise ValueError("building_name must not be blank")
        if not self.address.is_complete:
            raise ValueError(f"address must be complete, got {self.address}")
        state = lookup_state(self.address.state)
        if state is None:
            raise InvalidStateError(f"{self.address.state} is not a valid US state")
        self.address = replace(self.address, state=state)
        self.property_type = PropertyType(self.property_type)

    @property
    def display_name(self) -> str:
        return self.building_name

    @property
    def full_address(self) -> str:
        return str(self.address)

    @property
    def units(self) -> tuple[Unit, ...]:
        return tuple(self._units)

    def has_unit(self, unit_number: str) -> bool:
        return any(unit.unit_number == unit_number for unit in self._units)

    # Commands (ownership here)
    def add_unit(self, unit_number: str) -> Unit:
        if self.has_unit(unit_number):
            raise ValueError(f"unit {unit_number} already exists for {self.building_name}")
        unit = Unit(unit_number=unit_number, _building=self)
        # the ORM backref may already have appended it
        if unit not in self._units:
            self._units.append(unit)
        return unit


@dataclass(eq=False, kw_only=True)
class Unit(Entity):
    unit_number: str
    _building: Property = field(repr=False)

    def __post_init__(self) -> None:
        if not self.unit_number or not self.unit_number.strip():
            raise ValueError("unit_number must not be blank")

    @property
    def building(self) -> Property:
        return self._building

    @property
    def full_name(self) -> str:
        return f"{self._building.building_name} - Unit {self.unit_number}"
