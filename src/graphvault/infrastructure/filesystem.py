"""Snapshot file I/O.

The backing store is a single file rewritten in full on every save.
Writes go to a sibling temp file that is then renamed over the target,
so readers observe either the previous snapshot or the new one, never a
partial write.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def snapshot_exists(path: Path) -> bool:
    """Return True if a snapshot file is present at *path*."""
    return path.is_file()


def read_snapshot(path: Path) -> bytes:
    """Read the whole snapshot file."""
    return path.read_bytes()


def write_snapshot(path: Path, data: bytes, *, create_parents: bool = True) -> None:
    """Atomically replace *path* with *data*.

    Creates parent directories if they don't exist and *create_parents*
    is set. The temp file is removed if the write fails.
    """
    if create_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote snapshot %s (%d bytes)", path, len(data))
