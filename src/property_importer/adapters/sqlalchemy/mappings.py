"""SQLAlchemy mapping metadata for the property importer domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import composite, configure_mappers, relationship

from property_importer.domain.model import (
    Address,
    BatchStatus,
    ImportBatch,
    OriginalRow,
    Property,
    PropertyFields,
    PropertyType,
    RecordType,
    RowStatus,
    StagedRow,
    Unit,
    UnitFields,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class OriginalRowType(TypeDecorator[OriginalRow]):
    """Raw cell map plus source row number, stored as one JSON document."""

    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: OriginalRow | None, dialect: Dialect
    ) -> dict[str, Any] | None:
        _ = dialect
        if value is None:
            return None
        return {"values": dict(value.values), "source_row_number": value.source_row_number}

    def process_result_value(self, value: Any, dialect: Dialect) -> OriginalRow | None:
        _ = dialect
        if value is None:
            return None
        payload = cast(dict[str, Any], value)
        values = cast(dict[str, Any], payload.get("values") or {})
        return OriginalRow(
            values={str(key): str(cell) for key, cell in values.items()},
            source_row_number=int(payload.get("source_row_number", 0)),
        )


class ParsedFieldsType(TypeDecorator[PropertyFields]):
    """Normalised fields; unit rows carry an extra ``unit_number`` key."""

    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: PropertyFields | None, dialect: Dialect
    ) -> dict[str, Any] | None:
        _ = dialect
        if value is None:
            return None
        payload: dict[str, Any] = {
            "building_name": value.building_name,
            "street_address": value.street_address,
            "city": value.city,
            "state": value.state,
            "zip_code": value.zip_code,
        }
        if isinstance(value, UnitFields):
            payload["unit_number"] = value.unit_number
        return payload

    def process_result_value(self, value: Any, dialect: Dialect) -> PropertyFields | None:
        _ = dialect
        if value is None:
            return None
        payload = cast(dict[str, Any], value)
        fields = {
            "building_name": payload.get("building_name"),
            "street_address": payload.get("street_address"),
            "city": payload.get("city"),
            "state": payload.get("state"),
            "zip_code": payload.get("zip_code"),
        }
        if "unit_number" in payload:
            return UnitFields(**fields, unit_number=payload["unit_number"])
        return PropertyFields(**fields)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Canonical store -------------------------------------------------------------

property_table = Table(
    "property",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("building_name", String, nullable=False),
    Column("property_type", Enum(PropertyType, native_enum=False), nullable=False),
    Column("street_address", String, nullable=False),
    Column("city", String, nullable=False),
    Column("state", String, nullable=False),
    Column("zip_code", String, nullable=False),
    UniqueConstraint("building_name", name="uq_property_building_name"),
    UniqueConstraint(
        "street_address",
        "city",
        "state",
        "zip_code",
        name="uq_property_full_address",
    ),
)

unit_table = Table(
    "unit",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("created_at", UTCDateTime(), nullable=False),
    Column(
        "property_id",
        UUIDColumnType,
        ForeignKey("property.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("unit_number", String, nullable=False),
    UniqueConstraint("property_id", "unit_number", name="uq_unit_property_unit_number"),
)

# Staging ---------------------------------------------------------------------

import_batch_table = Table(
    "import_batch",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("filename", String, nullable=False),
    Column("status", Enum(BatchStatus, native_enum=False), nullable=False),
    Column("summary", JSON, nullable=False),
    Column("error_summary", JSON, nullable=True),
    Column("imported_at", UTCDateTime(), nullable=True),
    Column("properties_created_count", Integer, nullable=False),
    Column("units_created_count", Integer, nullable=False),
)

staged_row_table = Table(
    "staged_row",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("created_at", UTCDateTime(), nullable=False),
    Column(
        "batch_id",
        UUIDColumnType,
        ForeignKey("import_batch.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("record_type", Enum(RecordType, native_enum=False), nullable=False),
    Column("position", Integer, nullable=False),
    Column("original", OriginalRowType(), nullable=False),
    Column("parsed", ParsedFieldsType(), nullable=False),
    Column("status", Enum(RowStatus, native_enum=False), nullable=False),
    Column("messages", JSON, nullable=False),
    Column(
        "existing_property_id",
        UUIDColumnType,
        ForeignKey("property.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "created_property_id",
        UUIDColumnType,
        ForeignKey("property.id", ondelete="SET NULL"),
        nullable=True,
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(
        Property,
        property_table,
        properties={
            "address": composite(
                Address,
                property_table.c.street_address,
                property_table.c.city,
                property_table.c.state,
                property_table.c.zip_code,
            ),
            "_units": relationship(
                Unit,
                back_populates="_building",
                cascade="all, delete-orphan",
                order_by=unit_table.c.unit_number,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Unit,
        unit_table,
        properties={
            "_building": relationship(
                Property,
                back_populates="_units",
            ),
        },
    )

    mapper_registry.map_imperatively(
        ImportBatch,
        import_batch_table,
        properties={
            "_rows": relationship(
                StagedRow,
                back_populates="_batch",
                cascade="all, delete-orphan",
                order_by=staged_row_table.c.position,
            ),
        },
    )

    mapper_registry.map_imperatively(
        StagedRow,
        staged_row_table,
        properties={
            "_batch": relationship(
                ImportBatch,
                back_populates="_rows",
            ),
            "existing_property": relationship(
                Property,
                foreign_keys=[staged_row_table.c.existing_property_id],
            ),
            "created_property": relationship(
                Property,
                foreign_keys=[staged_row_table.c.created_property_id],
            ),
        },
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
