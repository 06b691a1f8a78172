"""Port interfaces for storage adapters.

The tailer depends only on this protocol, not on a concrete store.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from nginx_exporter.core.models import FileCursor


@runtime_checkable
class PositionStorePort(Protocol):
    """Port for per-file read position storage.

    Examples: InMemoryPositionStore.
    """

    def get(self, path: Path) -> FileCursor | None:
        """Return the cursor for a file, or None if it was never read."""
        ...

    def get_offset(self, path: Path) -> int:
        """Return the consumed byte offset for a file (0 if unseen)."""
        ...

    def set(self, cursor: FileCursor) -> None:
        """Record a new cursor for ``cursor.path``."""
        ...

    def discard(self, path: Path) -> None:
        """Forget a file that is no longer monitored."""
        ...

    def paths(self) -> list[Path]:
        """Return all tracked file paths."""
        ...
