"""Phase-based orchestrator for the preview half of the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from property_importer.domain.import_pipeline.context import PipelineContext
    from property_importer.domain.model import ImportBatch

log = getLogger(__name__)


class PipelinePhase(Protocol):
    """Contract implemented by each preview phase."""

    name: str

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None: ...


@dataclass(slots=True)
class ImportPipeline:
    """Compose and execute the ordered pipeline phases.

    The orchestrator only wires phases together and guarantees they run in
    order; transaction handling belongs to the caller's unit of work.
    """

    phases: Sequence[PipelinePhase] = field(default_factory=tuple)

    def with_phase(self, phase: PipelinePhase) -> ImportPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return ImportPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[PipelinePhase]) -> ImportPipeline:
        """Return a new pipeline with the provided ``phases`` concatenated."""

        return ImportPipeline(phases=(*self.phases, *tuple(phases)))

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> ImportBatch:
        """Execute the configured phases in-order against ``batch``."""

        for phase in self.phases:
            log.debug("Running phase %s for batch %s", phase.name, batch.id)
            phase.run(batch, context=context)
        return batch
