"""Job reporter implementations."""

import time
from typing import Optional

from .models import BatchSummary
from .observability import LogContext, StructuredLogger
from .protocols import LoggerProtocol


class NullReporter:
    """Reporter that ignores every event."""

    def on_item_start(self, name: str, index: int, total: int) -> None:
        pass

    def on_progress(self, fraction: float) -> None:
        pass

    def on_complete(self, summary: BatchSummary) -> None:
        pass


class LoggingReporter:
    """Reporter that writes progress lines to a logger, for CLI use."""

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._logger = logger or StructuredLogger("photo-batch.progress")
        self._context = LogContext(component="reporter", operation="progress")
        self._started_at: Optional[float] = None

    def on_item_start(self, name: str, index: int, total: int) -> None:
        if self._started_at is None:
            self._started_at = time.time()
        self._logger.info(f"Processing {index + 1}/{total}: {name}", self._context)

    def on_progress(self, fraction: float) -> None:
        elapsed = time.time() - self._started_at if self._started_at else 0.0
        self._logger.info(f"Progress: {fraction * 100:.1f}% - Elapsed: {elapsed:.1f}s", self._context)

    def on_complete(self, summary: BatchSummary) -> None:
        if summary.failed_count:
            self._logger.warning(f"Batch finished: {summary.describe()}", self._context)
            for failure in summary.failed:
                self._logger.warning(
                    f"  {failure.source_id}: {failure.reason.value}: {failure.message}",
                    self._context,
                )
        else:
            self._logger.info(f"Batch finished: {summary.describe()}", self._context)
