"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ConfigurationError, MissingConfigurationError

APP_DIR_NAME: Final[str] = "property-importer"
DEFAULT_DB_FILENAME: Final[str] = "properties.db"
DATA_DIR_ENV: Final[str] = "PROPERTY_IMPORTER_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    def __post_init__(self) -> None:
        if not self.uri.strip():
            raise MissingConfigurationError("Database URI must not be blank")
        if "://" not in self.uri:
            raise ConfigurationError(f"Database URI must include a scheme: {self.uri!r}")


# (env var, fallback under the home directory)
_NT_DATA_HOME: Final = ("LOCALAPPDATA", ("AppData", "Local"))
_POSIX_DATA_HOME: Final = ("XDG_DATA_HOME", (".local", "share"))


def _default_data_dir() -> Path:
    env_var, fallback = _NT_DATA_HOME if os.name == "nt" else _POSIX_DATA_HOME
    configured = os.getenv(env_var)
    base_path = Path(configured) if configured else Path.home().joinpath(*fallback)
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = os.getenv(DATABASE_URI_ENV)
    if env_uri is not None:
        try:
            return DatabaseConfig(uri=env_uri)
        except ConfigurationError as exc:
            raise type(exc)(str(exc), setting=DATABASE_URI_ENV) from exc
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())
