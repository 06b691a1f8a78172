"""Core domain models for access-log metrics."""

from dataclasses import dataclass, field
from pathlib import Path


class ParseError(ValueError):
    """A log line could not be turned into a LogRecord."""


@dataclass(frozen=True)
class FileCursor:
    """Read position within one monitored log file.

    Attributes:
        path: Concrete file path matched from the glob pattern.
        offset: Byte offset of the first unconsumed byte.
        inode: Inode observed when the offset was recorded.
    """

    path: Path
    offset: int = 0
    inode: int = 0


@dataclass(frozen=True)
class LogRecord:
    """A validated access log entry.

    Attributes:
        method: HTTP method (e.g., GET).
        path: Request URL path.
        status_code: HTTP status code, 100-599.
        host: Virtual host the request was served for.
        request_time: Request duration in seconds.
    """

    method: str
    path: str
    status_code: int
    host: str
    request_time: float


@dataclass(frozen=True, order=True)
class LabelKey:
    """Label combination that partitions metrics into series."""

    method: str
    path: str
    status: str
    host: str


@dataclass
class LabelStats:
    """Accumulated statistics for one LabelKey.

    Attributes:
        sum: Cumulative sum of request times in seconds.
        count: Cumulative number of observations.
        buckets: Cumulative bucket counts, one per histogram bound.
        samples: Request times observed during the current scrape only.
    """

    sum: float = 0.0
    count: int = 0
    buckets: list[int] = field(default_factory=list)
    samples: list[float] = field(default_factory=list)


@dataclass
class ScrapeCounters:
    """Process-lifetime counters describing the exporter itself."""

    lines_read: int = 0
    records_parsed: int = 0
    parse_errors: int = 0
    file_errors: int = 0
    rotations: int = 0
