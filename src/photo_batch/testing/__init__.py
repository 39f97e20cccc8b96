"""Testing utilities and fakes for the photo batch pipeline."""

from .fakes import (
    FailingByteSource,
    FailingReporter,
    FakeLogger,
    FakeS3Client,
    RecordingReporter,
    S3Bucket,
    S3Object,
    create_test_image,
    make_broken_source,
    make_source,
    setup_test_s3_environment,
)

__all__ = [
    "FailingByteSource",
    "FailingReporter",
    "FakeLogger",
    "FakeS3Client",
    "RecordingReporter",
    "S3Bucket",
    "S3Object",
    "create_test_image",
    "make_broken_source",
    "make_source",
    "setup_test_s3_environment",
]
