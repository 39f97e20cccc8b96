"""Core utilities and shared components for the photo batch pipeline."""

from .archive import default_archive_name, pack, read_entries
from .engine import ImageTransformEngine
from .exceptions import (
    AlreadyRunningError,
    ConfigurationError,
    DecodeError,
    DeliveryError,
    EncodeError,
    InvalidSpecError,
    PhotoBatchError,
    ReporterError,
    S3Error,
)
from .geometry import resolve_dimensions
from .logging_config import get_logger, setup_logger
from .models import (
    ArchiveBlob,
    BatchRunState,
    BatchSummary,
    ErrorKind,
    OutputFormat,
    ResizeSpec,
    RunStatus,
    SourceImage,
    ToneSpec,
    TransformFailure,
    TransformSpec,
    TransformSuccess,
    build_transform_spec,
)
from .presets import FILTER_PRESETS, get_preset
from .reporters import LoggingReporter, NullReporter
from .runner import BatchRunner, CancellationToken
from .services import BatchOutcome, BatchTransformService
from .tone import compose_tone_pipeline

__all__ = [
    "ArchiveBlob",
    "BatchOutcome",
    "BatchRunState",
    "BatchRunner",
    "BatchSummary",
    "BatchTransformService",
    "CancellationToken",
    "ErrorKind",
    "FILTER_PRESETS",
    "ImageTransformEngine",
    "LoggingReporter",
    "NullReporter",
    "OutputFormat",
    "ResizeSpec",
    "RunStatus",
    "SourceImage",
    "ToneSpec",
    "TransformFailure",
    "TransformSpec",
    "TransformSuccess",
    "build_transform_spec",
    "compose_tone_pipeline",
    "default_archive_name",
    "get_logger",
    "get_preset",
    "pack",
    "read_entries",
    "resolve_dimensions",
    "setup_logger",
    "PhotoBatchError",
    "InvalidSpecError",
    "AlreadyRunningError",
    "DecodeError",
    "EncodeError",
    "ReporterError",
    "S3Error",
    "DeliveryError",
    "ConfigurationError",
]
