"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .models import ArchiveBlob, BatchSummary


@runtime_checkable
class ByteSource(Protocol):
    """Retrieves the raw bytes of one source image."""

    def read(self) -> bytes:
        """Return the full encoded image."""
        ...


class JobReporter(Protocol):
    """Observer notified by the batch runner."""

    def on_item_start(self, name: str, index: int, total: int) -> None:
        """Called before an item is transformed. ``index`` is zero based."""
        ...

    def on_progress(self, fraction: float) -> None:
        """Called after every item with attempted / total."""
        ...

    def on_complete(self, summary: BatchSummary) -> None:
        """Called once when the run reaches a terminal state."""
        ...


class ArchiveSink(Protocol):
    """Delivers a finished archive to the user or to storage."""

    def deliver(self, archive: ArchiveBlob, name: str) -> str:
        """Store the archive and return where it went."""
        ...


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the pipeline uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...

    def get_paginator(self, operation_name: str) -> Any:
        """Get paginator for S3 operations."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log error message."""
        ...
