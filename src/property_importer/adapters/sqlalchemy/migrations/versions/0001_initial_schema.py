"""Initial schema: canonical properties and units, import batches and staged rows.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "property",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("building_name", sa.String(), nullable=False),
        sa.Column(
            "property_type",
            sa.Enum(
                "SINGLE_FAMILY",
                "MULTI_FAMILY",
                name="propertytype",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("street_address", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("zip_code", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_property"),
        sa.UniqueConstraint("building_name", name="uq_property_building_name"),
        sa.UniqueConstraint(
            "street_address",
            "city",
            "state",
            "zip_code",
            name="uq_property_full_address",
        ),
    )
    op.create_table(
        "import_batch",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "PREVIEWED",
                "IMPORTED",
                "FAILED",
                name="batchstatus",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("summary", sa.JSON(), nullable=False),
        sa.Column("error_summary", sa.JSON(), nullable=True),
        sa.Column("imported_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("properties_created_count", sa.Integer(), nullable=False),
        sa.Column("units_created_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_import_batch"),
    )
    op.create_table(
        "unit",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("unit_number", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["property.id"],
            name="fk_unit_property_id_property",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_unit"),
        sa.UniqueConstraint("property_id", "unit_number", name="uq_unit_property_unit_number"),
    )
    op.create_table(
        "staged_row",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column(
            "record_type",
            sa.Enum("PROPERTY", "UNIT", name="recordtype", native_enum=False),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("original", sa.JSON(), nullable=False),
        sa.Column("parsed", sa.JSON(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "VERIFIED",
                "REJECTED",
                "IMPORTED",
                name="rowstatus",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("messages", sa.JSON(), nullable=False),
        sa.Column("existing_property_id", sa.Uuid(), nullable=True),
        sa.Column("created_property_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["batch_id"],
            ["import_batch.id"],
            name="fk_staged_row_batch_id_import_batch",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["existing_property_id"],
            ["property.id"],
            name="fk_staged_row_existing_property_id_property",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["created_property_id"],
            ["property.id"],
            name="fk_staged_row_created_property_id_property",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_staged_row"),
    )
    op.create_index("ix_staged_row_batch_id", "staged_row", ["batch_id"])


def downgrade() -> None:
    op.drop_index("ix_staged_row_batch_id", table_name="staged_row")
    op.drop_table("staged_row")
    op.drop_table("unit")
    op.drop_table("import_batch")
    op.drop_table("property")
