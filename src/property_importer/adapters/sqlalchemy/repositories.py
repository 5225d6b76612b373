"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select, update

from property_importer.adapters.sqlalchemy.mappings import (
    import_batch_table,
    property_table,
    staged_row_table,
    unit_table,
)
from property_importer.domain.model import ImportBatch, Property, StagedRow, Unit

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable, Sequence

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session

    from property_importer.domain.model import Address, RowStatus


class SqlAlchemyPropertyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Property) -> None:
        self.session.add(entity)

    def get_by_name(self, building_name: str) -> Property | None:
        stmt = select(Property).where(property_table.c.building_name == building_name)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_address(self, address: Address) -> Property | None:
        stmt = (
            select(Property)
            .where(property_table.c.street_address == address.street_address)
            .where(property_table.c.city == address.city)
            .where(property_table.c.state == address.state)
            .where(property_table.c.zip_code == address.zip_code)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_exact(self, building_name: str, address: Address) -> Property | None:
        found = self.get_by_address(address)
        if found is None or found.building_name != building_name:
            return None
        return found

    def has_unit(self, property_: Property, unit_number: str) -> bool:
        stmt = (
            select(unit_table.c.id)
            .where(unit_table.c.property_id == property_.id)
            .where(unit_table.c.unit_number == unit_number)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none() is not None


class SqlAlchemyUnitRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Unit) -> None:
        self.session.add(entity)


class SqlAlchemyImportBatchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ImportBatch) -> None:
        self.session.add(entity)

    def get(self, batch_id: uuid.UUID) -> ImportBatch | None:
        return self.session.get(ImportBatch, batch_id)

    def recent(self, limit: int = 20) -> Sequence[ImportBatch]:
        stmt = select(ImportBatch).order_by(import_batch_table.c.created_at.desc()).limit(limit)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyStagedRowRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: StagedRow) -> None:
        self.session.add(entity)

    def for_batch(self, batch_id: uuid.UUID) -> Sequence[StagedRow]:
        stmt = (
            select(StagedRow)
            .where(staged_row_table.c.batch_id == batch_id)
            .order_by(staged_row_table.c.position)
        )
        return self.session.execute(stmt).scalars().all()

    def update_status(self, rows: Iterable[StagedRow], status: RowStatus) -> int:
        ids = [row.id for row in rows]
        if not ids:
            return 0
        stmt = (
            update(StagedRow)
            .where(staged_row_table.c.id.in_(ids))
            .values(status=status)
            .execution_options(synchronize_session="fetch")
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        return result.rowcount
