"""In-memory storage adapter for file read positions."""

import threading
from pathlib import Path

from nginx_exporter.core.models import FileCursor


class InMemoryPositionStore:
    """In-memory implementation of PositionStorePort.

    Offsets live only as long as the process. Every operation holds an
    internal lock, so a single store may be shared between threads.
    """

    def __init__(self) -> None:
        self._cursors: dict[Path, FileCursor] = {}
        self._lock = threading.Lock()

    def get(self, path: Path) -> FileCursor | None:
        """Return the cursor for a file, or None if it was never read."""
        with self._lock:
            return self._cursors.get(Path(path))

    def get_offset(self, path: Path) -> int:
        """Return the consumed byte offset for a file (0 if unseen)."""
        cursor = self.get(path)
        return cursor.offset if cursor is not None else 0

    def set(self, cursor: FileCursor) -> None:
        """Record a new cursor for ``cursor.path``."""
        if cursor.offset < 0:
            raise ValueError(f"offset must be non-negative, got {cursor.offset}")
        with self._lock:
            self._cursors[Path(cursor.path)] = cursor

    def discard(self, path: Path) -> None:
        """Forget a file that is no longer monitored."""
        with self._lock:
            self._cursors.pop(Path(path), None)

    def paths(self) -> list[Path]:
        """Return all tracked file paths, sorted."""
        with self._lock:
            return sorted(self._cursors)
