"""Byte sources and discovery of source images on disk or in S3."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional

from .error_handling import retry_s3_operation, with_error_handling
from .models import SourceImage
from .observability import StructuredLogger
from .protocols import LoggerProtocol, S3ClientProtocol

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff")


@dataclass(frozen=True)
class InMemoryByteSource:
    """Bytes already held by the caller."""

    data: bytes = field(repr=False)

    def read(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class FileByteSource:
    """Reads an image file from local disk on demand."""

    path: Path

    def read(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class S3ByteSource:
    """Downloads an object from S3 on demand."""

    s3_client: S3ClientProtocol = field(repr=False)
    bucket: str
    key: str

    @retry_s3_operation()
    @with_error_handling
    def read(self) -> bytes:
        response = self.s3_client.get_object(Bucket=self.bucket, Key=self.key)
        return response["Body"].read()


def is_image_name(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)


def discover_local_images(directory: Path, recursive: bool = False) -> List[SourceImage]:
    """
    List image files under a directory as SourceImages.

    Args:
        directory: Folder to scan
        recursive: Descend into subfolders

    Returns:
        SourceImages sorted by path, display name is the file stem

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")

    iterator = directory.rglob("*") if recursive else directory.glob("*")
    paths = sorted(
        (p for p in iterator if p.is_file() and is_image_name(p.name)),
        key=lambda p: str(p).lower(),
    )
    return [
        SourceImage(id=str(path), display_name=path.stem, byte_source=FileByteSource(path))
        for path in paths
    ]


class S3ImageDiscoveryService:
    """Service for discovering source images in an S3 bucket."""

    def __init__(self, s3_client: S3ClientProtocol, logger: Optional[LoggerProtocol] = None):
        self._s3_client = s3_client
        self._logger = logger or StructuredLogger("photo-batch.discovery")

    @retry_s3_operation()
    @with_error_handling
    def list_image_keys(self, bucket: str, prefix: str = "") -> List[str]:
        """List image object keys under a prefix, in key order."""
        list_prefix = prefix
        if prefix and not prefix.endswith("/"):
            list_prefix = prefix + "/"

        self._logger.debug(f"Discovering images in s3://{bucket}/{list_prefix}")

        keys = []
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=list_prefix):
            for obj in page.get("Contents", []):
                key = obj["Key"]
                if not key.endswith("/") and is_image_name(key):
                    keys.append(key)

        self._logger.info(f"Found {len(keys)} images in s3://{bucket}/{list_prefix}")
        return sorted(keys)

    def discover(self, bucket: str, prefix: str = "") -> List[SourceImage]:
        """Discover images and wrap each key in a lazily downloading source."""
        return [
            SourceImage(
                id=key,
                display_name=PurePosixPath(key).stem,
                byte_source=S3ByteSource(self._s3_client, bucket, key),
            )
            for key in self.list_image_keys(bucket, prefix)
        ]
