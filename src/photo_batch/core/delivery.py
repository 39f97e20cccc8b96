"""Archive sinks: where a finished batch archive is handed over."""

from pathlib import Path
from typing import Optional

from .error_handling import retry_s3_operation, with_error_handling
from .exceptions import DeliveryError
from .models import ArchiveBlob
from .observability import StructuredLogger
from .protocols import LoggerProtocol, S3ClientProtocol

ARCHIVE_CONTENT_TYPE = "application/zip"


class LocalArchiveSink:
    """Writes archives into a local directory."""

    def __init__(self, directory: Path, logger: Optional[LoggerProtocol] = None):
        self._directory = Path(directory)
        self._logger = logger or StructuredLogger("photo-batch.delivery")

    def deliver(self, archive: ArchiveBlob, name: str) -> str:
        destination = self._directory / name
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(archive.data)
        except OSError as e:
            raise DeliveryError(f"Failed to write archive {destination}: {e}") from e

        self._logger.info(f"Wrote archive with {archive.entry_count} entries to {destination}")
        return str(destination)


class S3ArchiveSink:
    """Uploads archives to an S3 bucket under an optional prefix."""

    def __init__(
        self,
        s3_client: S3ClientProtocol,
        bucket: str,
        prefix: str = "",
        logger: Optional[LoggerProtocol] = None,
    ):
        self._s3_client = s3_client
        self._bucket = bucket
        self._prefix = prefix
        self._logger = logger or StructuredLogger("photo-batch.delivery")

    def key_for(self, name: str) -> str:
        if self._prefix:
            return f"{self._prefix.rstrip('/')}/{name}"
        return name

    @retry_s3_operation()
    @with_error_handling
    def _upload(self, key: str, data: bytes) -> None:
        self._s3_client.put_object(
            Bucket=self._bucket, Key=key, Body=data, ContentType=ARCHIVE_CONTENT_TYPE
        )

    def deliver(self, archive: ArchiveBlob, name: str) -> str:
        key = self.key_for(name)
        try:
            self._upload(key, archive.data)
        except Exception as e:
            raise DeliveryError(f"Failed to upload archive to s3://{self._bucket}/{key}: {e}") from e

        location = f"s3://{self._bucket}/{key}"
        self._logger.info(f"Uploaded archive with {archive.entry_count} entries to {location}")
        return location
