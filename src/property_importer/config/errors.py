"""Errors for the importer's storage settings (data directory and database URI)."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A storage setting is present but unusable, such as a URI without a scheme.

    ``setting`` names the environment variable the bad value came from, when known.
    """

    def __init__(self, message: str, *, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class MissingConfigurationError(ConfigurationError):
    """A storage setting resolved to an empty value."""
