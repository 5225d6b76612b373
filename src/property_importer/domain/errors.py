"""Error types raised by the import pipeline and the domain model."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class PropertyImportError(RuntimeError):
    """Base class for fatal import pipeline errors."""


class MissingHeadersError(PropertyImportError):
    """Raised when the header row lacks one or more required columns."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class BatchNotFoundError(PropertyImportError):
    """Raised when an import batch id does not resolve."""

    def __init__(self, batch_id: UUID) -> None:
        self.batch_id = batch_id
        super().__init__(f"Import batch {batch_id} not found")


class CommitError(PropertyImportError):
    """Raised when a verified row cannot be materialised during commit."""


class InvalidStateError(ValueError):
    """Raised when a state name does not resolve to a recognised US state."""


class InvalidRecordError(ValueError):
    """Raised when a staged row's parsed fields do not fit its record type."""
