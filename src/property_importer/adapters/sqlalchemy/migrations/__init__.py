"""Alembic helpers: build the packaged config, upgrade and inspect revisions."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from property_importer.config import get_database_config

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[5]
PYPROJECT_PATH: Final[Path] = PROJECT_ROOT / "pyproject.toml"
MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
RESERVED_OPTIONS: Final = frozenset({"script_location", "sqlalchemy.url"})

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _pyproject_options() -> dict[str, str]:
    """Return ``[tool.alembic]`` from pyproject.toml, or nothing for installed wheels."""

    try:
        with PYPROJECT_PATH.open("rb") as pyproject_file:
            document = tomllib.load(pyproject_file)
    except FileNotFoundError:
        return {}
    section = document.get("tool", {}).get("alembic", {})
    return {str(key): str(value) for key, value in section.items()}


def _script_location(options: dict[str, str]) -> Path:
    configured = options.get("script_location")
    if configured is None:
        return MIGRATIONS_PATH
    candidate = Path(configured)
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate if candidate.exists() else MIGRATIONS_PATH


def build_config() -> Config:
    """Alembic config pointing at the migration scripts shipped with this package."""

    options = _pyproject_options()
    config = Config()
    config.set_main_option("script_location", str(_script_location(options)))
    for key, value in options.items():
        if key not in RESERVED_OPTIONS:
            config.set_main_option(key, value)
    return config


def head_revision() -> str | None:
    return ScriptDirectory.from_config(build_config()).get_current_head()


def current_revision(engine: Engine) -> str | None:
    """Revision recorded in the database behind ``engine``; ``None`` before the first upgrade."""

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the schema to the newest revision.

    With ``engine`` the upgrade runs on one of its connections, which keeps
    in-memory SQLite databases intact; otherwise ``database_uri`` (or the
    configured database) is opened by the migration environment.
    """

    config = build_config()
    if engine is not None:
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
        return
    config.set_main_option("sqlalchemy.url", database_uri or get_database_config().uri)
    command.upgrade(config, "head")
