"""Public domain model surface."""

from __future__ import annotations

from property_importer.domain.model.base import Entity, new_id, utc_now
from property_importer.domain.model.enums import BatchStatus, PropertyType, RecordType, RowStatus
from property_importer.domain.model.primitives import (
    Address,
    OriginalRow,
    PropertyFields,
    UnitFields,
)
from property_importer.domain.model.property import Property, Unit
from property_importer.domain.model.staging import (
    MESSAGE_SEPARATOR,
    ImportBatch,
    StagedRow,
    pending,
    property_rows,
    rejected,
    unit_rows,
    verified,
    with_status,
)
from property_importer.domain.model.states import (
    STATE_CODES,
    STATE_LOOKUP,
    US_STATES,
    lookup_state,
)

__all__ = [  # noqa: RUF022
    # identity
    "Entity",
    "new_id",
    "utc_now",
    # enums
    "BatchStatus",
    "PropertyType",
    "RecordType",
    "RowStatus",
    # value objects
    "Address",
    "OriginalRow",
    "PropertyFields",
    "UnitFields",
    # canonical store
    "Property",
    "Unit",
    # staging
    "MESSAGE_SEPARATOR",
    "ImportBatch",
    "StagedRow",
    "pending",
    "property_rows",
    "rejected",
    "unit_rows",
    "verified",
    "with_status",
    # states
    "STATE_CODES",
    "STATE_LOOKUP",
    "US_STATES",
    "lookup_state",
]
