"""Sequential batch runner with progress reporting and cancellation."""

import threading
import time
from typing import Any, Iterable, Mapping, Optional, Union

from .engine import ImageTransformEngine
from .error_handling import BatchOperationContextManager
from .exceptions import AlreadyRunningError, ReporterError
from .models import (
    BatchRunState,
    BatchSummary,
    ErrorKind,
    RunStatus,
    SourceImage,
    TransformFailure,
    TransformResult,
    TransformSpec,
    ensure_valid_spec,
)
from .observability import LogContext, MetricsCollector, StructuredLogger
from .protocols import JobReporter, LoggerProtocol
from .reporters import NullReporter


class CancellationToken:
    """Cooperative cancellation flag, checked by the runner between items."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class BatchRunner:
    """
    Runs the transform engine over an ordered list of sources.

    One item at a time, strictly in input order. A failing item is recorded
    and the run moves on; cancellation is only honoured before an item
    starts. A runner handles a single run at a time and can be reused once
    the previous run has finished.
    """

    def __init__(
        self,
        engine: Optional[ImageTransformEngine] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._logger = logger or StructuredLogger("photo-batch.runner")
        self._engine = engine or ImageTransformEngine(logger=self._logger)
        self._metrics_collector = metrics_collector
        self._lock = threading.Lock()
        self._status = RunStatus.IDLE
        self._state: Optional[BatchRunState] = None

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is RunStatus.RUNNING

    def snapshot(self) -> Optional[BatchRunState]:
        """Immutable view of the active run, None when no run is active."""
        return self._state

    def run(
        self,
        sources: Iterable[SourceImage],
        spec: Union[TransformSpec, Mapping[str, Any]],
        reporter: Optional[JobReporter] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BatchSummary:
        """
        Transform every source and return the terminal summary.

        Raises:
            AlreadyRunningError: If this runner already has an active run
            InvalidSpecError: If ``spec`` fails validation; no item is touched
        """
        if not self._lock.acquire(blocking=False):
            raise AlreadyRunningError("A batch run is already active on this runner")
        try:
            valid_spec = ensure_valid_spec(spec)
            return self._run_locked(
                list(sources),
                valid_spec,
                reporter or NullReporter(),
                cancel_token or CancellationToken(),
            )
        finally:
            self._lock.release()

    def _run_locked(
        self,
        sources: list,
        spec: TransformSpec,
        reporter: JobReporter,
        cancel_token: CancellationToken,
    ) -> BatchSummary:
        total = len(sources)
        context = LogContext(component="batch_runner", operation="batch_run").with_metadata(
            total=total, output_format=spec.output_format.value
        )
        self._status = RunStatus.RUNNING
        self._state = BatchRunState(total=total)
        cancelled = False

        self._logger.info("Starting batch run", context)
        try:
            with BatchOperationContextManager(f"Batch transform of {total} image(s)") as ledger:
                for index, source in enumerate(sources):
                    if cancel_token.is_cancelled:
                        cancelled = True
                        self._logger.warning(
                            "Batch run cancelled", context, completed=self._state.completed_count
                        )
                        break

                    self._state = self._state.model_copy(
                        update={"current_item_name": source.display_name}
                    )
                    self._notify(reporter, "on_item_start", context, source.display_name, index, total)

                    result = self._transform_one(source, spec, context)
                    if isinstance(result, TransformFailure):
                        ledger.add_failure(result)

                    self._state = self._state.model_copy(
                        update={
                            "completed_count": self._state.completed_count + 1,
                            "results": self._state.results + (result,),
                        }
                    )
                    self._notify(reporter, "on_progress", context, self._state.fraction)

            summary = BatchSummary(
                total=total, results=self._state.results, was_cancelled=cancelled
            )
        finally:
            self._state = None
            self._status = RunStatus.CANCELLED if cancelled else RunStatus.COMPLETED

        self._logger.info(f"Batch run finished: {summary.describe()}", context)
        self._notify(reporter, "on_complete", context, summary)
        return summary

    def _transform_one(
        self, source: SourceImage, spec: TransformSpec, context: LogContext
    ) -> TransformResult:
        item_context = context.with_operation("transform_image")
        start_time = time.time()
        try:
            result = self._engine.transform(source, spec, item_context)
        except Exception as e:
            self._logger.error(f"Unexpected engine failure: {e}", item_context, source_id=source.id)
            result = TransformFailure(
                source_id=source.id, reason=ErrorKind.TRANSFORM_ERROR, message=str(e)
            )

        if self._metrics_collector is not None:
            self._metrics_collector.record(
                "transform_image",
                start_time,
                success=result.ok,
                error_message=None if result.ok else result.message,
                source_id=source.id,
            )
        return result

    def _notify(self, reporter: JobReporter, event: str, context: LogContext, *args: Any) -> None:
        try:
            getattr(reporter, event)(*args)
        except Exception as e:
            error = ReporterError(f"Reporter callback {event} failed: {e}")
            self._logger.warning(str(error), context)
