"""Packs successful outputs into a single ZIP archive."""

import io
import time
import zipfile
from typing import Dict, Iterable, Optional

from .models import ArchiveBlob, TransformSuccess

# Fixed entry timestamp so identical inputs give identical archive bytes.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_PERMISSIONS = 0o644 << 16


def pack(
    successes: Iterable[TransformSuccess],
    compression: int = zipfile.ZIP_STORED,
) -> ArchiveBlob:
    """
    Build an archive from successful results, in input order.

    A repeated name keeps the position of its first occurrence and the bytes
    of its last one. Names are never rewritten; callers wanting unique
    entries must disambiguate before packing.

    Args:
        successes: Ordered successful transform results
        compression: zipfile compression constant (stored by default since
            the entries are already encoded images)

    Returns:
        ArchiveBlob, a valid empty ZIP when there is nothing to pack
    """
    entries: Dict[str, bytes] = {}
    for success in successes:
        entries[success.name] = success.data

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=compression) as archive:
        for name, data in entries.items():
            info = zipfile.ZipInfo(filename=name, date_time=ENTRY_DATE_TIME)
            info.compress_type = compression
            info.external_attr = ENTRY_PERMISSIONS
            archive.writestr(info, data)

    return ArchiveBlob(data=buffer.getvalue(), entry_names=tuple(entries))


def read_entries(archive: ArchiveBlob) -> Dict[str, bytes]:
    return archive.read_entries()


def default_archive_name(timestamp_ms: Optional[int] = None) -> str:
    """Download name for a batch, e.g. ``batch-processed-1700000000000.zip``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"batch-processed-{timestamp_ms}.zip"
