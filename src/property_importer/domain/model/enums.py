"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BatchStatus(StrEnum):
    PENDING = "pending"
    PREVIEWED = "previewed"
    IMPORTED = "imported"
    FAILED = "failed"


class RowStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    IMPORTED = "imported"


class RecordType(StrEnum):
    PROPERTY = "property"
    UNIT = "unit"


class PropertyType(StrEnum):
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
