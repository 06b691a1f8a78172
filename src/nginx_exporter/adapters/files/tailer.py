"""Incremental reading of growing log files with rotation detection.

Only bytes appended since the previous read are returned. Rotation is
detected when the file shrinks below the stored offset or its inode changes,
and reading then restarts at the beginning of the new file.
"""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from nginx_exporter.core.models import FileCursor
from nginx_exporter.core.ports import PositionStorePort

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


@dataclass
class TailResult:
    """Outcome of tailing one file.

    Attributes:
        lines: Complete lines read, without their trailing newline.
        rotated: True if rotation or truncation reset the offset.
        error: Description of the I/O failure, if the file could not be read.
    """

    lines: list[bytes] = field(default_factory=list)
    rotated: bool = False
    error: str | None = None


class LogTailer:
    """Reads new complete lines from every file matching a glob pattern.

    Attributes:
        pattern: Glob pattern or plain path of the monitored files.
        store: Position store holding one FileCursor per file.
    """

    def __init__(self, pattern: str, store: PositionStorePort):
        self.pattern = pattern
        self.store = store

    def resolve(self) -> list[Path]:
        """Expand the pattern to the files currently monitored.

        Cursors of files that stopped matching are discarded. A plain path
        without glob characters is always returned so that a missing file is
        reported by ``tail()`` instead of silently ignored.
        """
        matched = sorted(Path(p) for p in glob.glob(self.pattern) if Path(p).is_file())
        if not matched and not _GLOB_CHARS.intersection(self.pattern):
            matched = [Path(self.pattern)]

        current = set(matched)
        for path in self.store.paths():
            if path not in current:
                logger.debug(f"Remove file {path} from watch")
                self.store.discard(path)
        return matched

    def tail(self, path: str | Path) -> TailResult:
        """Read the complete lines appended to a file since the last call.

        A trailing line without a newline is left unread; the stored offset
        points at its first byte so it is read whole once completed.

        Args:
            path: File to read.

        Returns:
            TailResult with the new lines. I/O failures are logged and
            reported through ``error`` with no lines.
        """
        path = Path(path)
        try:
            stat = path.stat()
        except OSError as e:
            logger.warning(f"Failed to stat log file {path}: {e}")
            return TailResult(error=str(e))

        cursor = self.store.get(path)
        offset = cursor.offset if cursor is not None else 0
        rotated = False
        if cursor is not None:
            if stat.st_size < cursor.offset:
                logger.info(
                    f"Log file {path} was truncated "
                    f"(offset {cursor.offset} > size {stat.st_size})"
                )
                rotated = True
            elif cursor.inode and cursor.inode != stat.st_ino:
                logger.info(
                    f"Log rotation detected for {path} "
                    f"(inode changed from {cursor.inode} to {stat.st_ino})"
                )
                rotated = True
        if rotated:
            offset = 0

        if stat.st_size == offset:
            if cursor is None or rotated:
                self.store.set(FileCursor(path, offset, stat.st_ino))
            return TailResult(rotated=rotated)

        try:
            with path.open("rb") as f:
                f.seek(offset)
                data = f.read(stat.st_size - offset)
        except OSError as e:
            logger.warning(f"Failed to read log file {path}: {e}")
            return TailResult(rotated=rotated, error=str(e))

        end = data.rfind(b"\n")
        if end == -1:
            lines: list[bytes] = []
            new_offset = offset
        else:
            lines = data[:end].split(b"\n")
            new_offset = offset + end + 1

        self.store.set(FileCursor(path, new_offset, stat.st_ino))
        if lines:
            logger.debug(
                f"Read {len(lines)} new lines from {path} "
                f"(offset {offset} -> {new_offset})"
            )
        return TailResult(lines=lines, rotated=rotated)

    def tail_all(self) -> Iterator[tuple[Path, TailResult]]:
        """Tail every monitored file, one after another."""
        for path in self.resolve():
            yield path, self.tail(path)
