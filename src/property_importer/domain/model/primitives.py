"""Domain primitives: small value objects shared by staging and canonical records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from property_importer.domain.model.states import lookup_state

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Address:
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    @property
    def is_complete(self) -> bool:
        return all(self.__composite_values__())

    def normalized(self) -> Address:
        """Return a copy whose state uses the canonical spelling when it resolves."""
        canonical = lookup_state(self.state)
        if canonical is None or canonical == self.state:
            return self
        return replace(self, state=canonical)

    def __str__(self) -> str:
        return f"{self.street_address}, {self.city}, {self.state} {self.zip_code}"

    def __composite_values__(
        self,
    ) -> tuple[str | None, str | None, str | None, str | None]:
        """For SQLAlchemy composite columns (adapter-side convenience)."""
        return (self.street_address, self.city, self.state, self.zip_code)


@dataclass(frozen=True, slots=True)
class OriginalRow:
    """Raw cell values of one source row, keyed by header, plus its 1-based row number."""

    values: Mapping[str, str] = field(default_factory=dict[str, str])
    source_row_number: int = 0

    def get(self, header: str) -> str:
        return self.values.get(header, "")


@dataclass(frozen=True, slots=True)
class PropertyFields:
    """Normalised building fields staged for a property row."""

    building_name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    @property
    def address(self) -> Address:
        return Address(self.street_address, self.city, self.state, self.zip_code)

    def key_values(self) -> tuple[str | None, ...]:
        return (
            self.building_name,
            self.street_address,
            self.city,
            self.state,
            self.zip_code,
        )


@dataclass(frozen=True, slots=True)
class UnitFields(PropertyFields):
    """Building fields plus the normalised unit label for a unit row."""

    unit_number: str | None = None
