"""SQLAlchemy unit of work for the import pipeline, plus adapter lifecycle.

``startup()`` migrates the database and installs a module-wide session
factory; every ``SqlAlchemyImportUnitOfWork`` opens one session from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from property_importer.adapters.sqlalchemy.mappings import start_mappers
from property_importer.adapters.sqlalchemy.migrations import current_revision, upgrade_head
from property_importer.adapters.sqlalchemy.repositories import (
    SqlAlchemyImportBatchRepository,
    SqlAlchemyPropertyRepository,
    SqlAlchemyStagedRowRepository,
    SqlAlchemyUnitRepository,
)
from property_importer.config import get_database_config
from property_importer.domain.ports.unit_of_work import ImportRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup()`` or started twice."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def sessions(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call property_importer.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create (or adopt) the engine, map the model and migrate the schema to head."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine
    # rows must stay readable after commit for the result objects
    _STATE.session_factory = sessionmaker(bind=resolved_engine, expire_on_commit=False)
    log.info(
        "Database %s ready at revision %s",
        resolved_engine.url.render_as_string(hide_password=True),
        current_revision(resolved_engine),
    )


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget the session factory."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.session_factory = None


class SqlAlchemyImportUnitOfWork:
    """One session for one phase of an import; rolled back when the block raises."""

    def __init__(self) -> None:
        self.session_factory = _STATE.sessions()
        self._session: Session | None = None
        self._repositories: ImportRepositories | None = None

    def __enter__(self) -> SqlAlchemyImportUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work session already initialised")
        session = self.session_factory()
        self._session = session
        self._repositories = ImportRepositories(
            properties=SqlAlchemyPropertyRepository(session),
            units=SqlAlchemyUnitRepository(session),
            batches=SqlAlchemyImportBatchRepository(session),
            staged_rows=SqlAlchemyStagedRowRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @property
    def repositories(self) -> ImportRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from property_importer.domain.ports.unit_of_work import ImportUnitOfWork

    _uow_check: ImportUnitOfWork = SqlAlchemyImportUnitOfWork()
