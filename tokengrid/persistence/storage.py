"""Storage backends — where snapshots live.

The core only needs a single durable slot it can read, overwrite, and
delete.  Two backends are included:

1. ``InMemoryStorage`` - a plain attribute; lost on exit (tests, demos).
2. ``JsonFileStorage`` - one JSON file on disk, replaced atomically.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class SnapshotStorage(ABC):
    """A single-slot durable key-value store for serialized snapshots."""

    @abstractmethod
    def read(self) -> bytes | None:
        """Return the stored bytes, or None if nothing is stored."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Overwrite the stored bytes."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the stored bytes.  Deleting an empty slot is a no-op."""


class InMemoryStorage(SnapshotStorage):
    """Keeps the snapshot in process memory."""

    def __init__(self, data: bytes | None = None) -> None:
        self.data = data

    def read(self) -> bytes | None:
        return self.data

    def write(self, data: bytes) -> None:
        self.data = data

    def delete(self) -> None:
        self.data = None


class JsonFileStorage(SnapshotStorage):
    """Keeps the snapshot in a file on disk.

    The file is read and written as raw bytes; decoding is left to the
    codec so an undecodable file is treated like any other corrupt save.
    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash mid-write leaves the previous
    snapshot intact.

    Attributes:
        path: Location of the snapshot file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.debug("Deleted snapshot %s", self.path)
