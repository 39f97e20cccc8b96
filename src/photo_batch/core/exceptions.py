"""Custom exceptions for the photo batch pipeline."""

from __future__ import annotations


class PhotoBatchError(Exception):
    """Base exception for all photo batch errors."""


class InvalidSpecError(PhotoBatchError):
    """Error raised when a transform spec fails validation.

    Raised before any item of a batch is processed.
    """


class AlreadyRunningError(PhotoBatchError):
    """Error raised when a runner is invoked while a run is active."""


class DecodeError(PhotoBatchError):
    """Error raised when source bytes cannot be retrieved or decoded."""


class EncodeError(PhotoBatchError):
    """Error raised when a transformed surface cannot be encoded."""


class ReporterError(PhotoBatchError):
    """Error raised by a job reporter callback. Logged, never propagated."""


class S3Error(PhotoBatchError):
    """Error raised for S3 related failures."""


class DeliveryError(PhotoBatchError):
    """Error raised when a finished archive cannot be delivered."""


class ConfigurationError(PhotoBatchError):
    """Error raised for invalid job configuration options."""
