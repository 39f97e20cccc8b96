"""Service layer tying the runner, the archive packager and delivery together."""

from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Union

from .archive import default_archive_name, pack
from .models import ArchiveBlob, BatchSummary, SourceImage, TransformSpec
from .observability import LogContext, StructuredLogger
from .protocols import ArchiveSink, JobReporter, LoggerProtocol
from .runner import BatchRunner, CancellationToken


@dataclass(frozen=True)
class BatchOutcome:
    """Archive and summary of a run, plus where the archive was delivered."""

    archive: ArchiveBlob
    summary: BatchSummary
    location: Optional[str] = None

    @property
    def has_output(self) -> bool:
        return self.summary.succeeded_count > 0


class BatchTransformService:
    """Runs a batch and packs its successes into one archive."""

    def __init__(self, runner: BatchRunner, logger: Optional[LoggerProtocol] = None):
        self._runner = runner
        self._logger = logger or StructuredLogger("photo-batch.service")

    @property
    def runner(self) -> BatchRunner:
        return self._runner

    def execute(
        self,
        sources: Iterable[SourceImage],
        spec: Union[TransformSpec, Mapping[str, Any]],
        reporter: Optional[JobReporter] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BatchOutcome:
        """Run the batch and build the archive. Never touches disk or network."""
        summary = self._runner.run(sources, spec, reporter, cancel_token)
        archive = pack(summary.succeeded)
        self._logger.debug(
            f"Packed {archive.entry_count} entries ({len(archive.data)} bytes)",
            LogContext(component="batch_service", operation="pack"),
        )
        return BatchOutcome(archive=archive, summary=summary)

    def deliver(
        self, outcome: BatchOutcome, sink: ArchiveSink, name: Optional[str] = None
    ) -> BatchOutcome:
        """Hand the archive to a sink when at least one item succeeded."""
        context = LogContext(component="batch_service", operation="deliver")
        if not outcome.has_output:
            self._logger.warning("No images were processed successfully, nothing to deliver", context)
            return outcome

        location = sink.deliver(outcome.archive, name or default_archive_name())
        self._logger.info(f"Archive delivered to {location}", context)
        return replace(outcome, location=location)

    def process(
        self,
        sources: Iterable[SourceImage],
        spec: Union[TransformSpec, Mapping[str, Any]],
        sink: ArchiveSink,
        reporter: Optional[JobReporter] = None,
        cancel_token: Optional[CancellationToken] = None,
        archive_name: Optional[str] = None,
    ) -> BatchOutcome:
        """Execute then deliver."""
        outcome = self.execute(sources, spec, reporter, cancel_token)
        return self.deliver(outcome, sink, archive_name)
