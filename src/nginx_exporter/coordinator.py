"""Per-scrape orchestration: tail, parse, aggregate, encode."""

import logging
import threading

from nginx_exporter.adapters.files.tailer import LogTailer
from nginx_exporter.adapters.storage.in_memory import InMemoryPositionStore
from nginx_exporter.config import ExporterConfig
from nginx_exporter.core.aggregation import Aggregator, Mode
from nginx_exporter.core.encoding.prometheus import (
    CONTENT_TYPE,
    encode_counters,
    encode_histogram,
    encode_summary,
)
from nginx_exporter.core.models import ParseError, ScrapeCounters
from nginx_exporter.core.parsing import parse_line
from nginx_exporter.core.ports import PositionStorePort

logger = logging.getLogger(__name__)


class ScrapeCoordinator:
    """Owns the shared exporter state and runs one full pass per scrape.

    The position store, aggregate state and counters are only touched while
    ``_lock`` is held, so concurrent scrapes are serialized and every
    appended line is counted exactly once.

    Example:
        ```python
        coordinator = ScrapeCoordinator(ExporterConfig(log_path="/var/log/nginx/access.log"))
        body = coordinator.scrape()
        ```
    """

    content_type = CONTENT_TYPE

    def __init__(
        self,
        config: ExporterConfig,
        store: PositionStorePort | None = None,
    ) -> None:
        self.config = config
        self.store = store if store is not None else InMemoryPositionStore()
        self.tailer = LogTailer(config.log_path, self.store)
        self.aggregator = Aggregator(config.mode, config.status_grouping)
        self.counters = ScrapeCounters()
        self._lock = threading.Lock()

    def _collect(self) -> None:
        """Fold every new line of every monitored file into the state."""
        for path, result in self.tailer.tail_all():
            if result.error is not None:
                self.counters.file_errors += 1
                continue
            if result.rotated:
                self.counters.rotations += 1
            for line in result.lines:
                if not line.strip():
                    continue
                self.counters.lines_read += 1
                try:
                    record = parse_line(line, self.config.fields)
                except ParseError as e:
                    self.counters.parse_errors += 1
                    logger.debug(f"Failed to parse log line from {path}: {line!r} - {e}")
                    continue
                self.aggregator.apply(record)
                self.counters.records_parsed += 1

    def _encode(self) -> str:
        name = self.config.metric_name
        state = self.aggregator.state
        if self.config.mode is Mode.SUMMARY:
            body = encode_summary(name, state, self.aggregator.quantiles())
            self.aggregator.reset_window()
        else:
            body = encode_histogram(name, state, self.aggregator.buckets)
        return body + encode_counters(self.counters)

    def scrape(self) -> str:
        """Run tail, parse, aggregate and encode under the state lock.

        Returns:
            Prometheus text exposition of the current state.
        """
        with self._lock:
            errors_before = self.counters.parse_errors
            self._collect()
            skipped = self.counters.parse_errors - errors_before
            if skipped:
                logger.warning(f"Skipped {skipped} unparseable log lines")
            return self._encode()
