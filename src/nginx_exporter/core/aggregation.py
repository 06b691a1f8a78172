"""Folding log records into label-keyed request duration statistics."""

import math
from enum import Enum

from nginx_exporter.core.models import LabelKey, LabelStats, LogRecord

# Exponential bounds: 0.005 doubled ten times. +Inf is implicit and equals count.
HISTOGRAM_BUCKETS = [0.005, 0.01, 0.02, 0.04, 0.08, 0.16, 0.32, 0.64, 1.28, 2.56]

SUMMARY_QUANTILES = [0.5, 0.9, 0.95, 0.99]


class Mode(str, Enum):
    """Exposition variant of the request duration metric."""

    HISTOGRAM = "histogram"
    SUMMARY = "summary"


class StatusGrouping(str, Enum):
    """How the status code is turned into a label value."""

    CLASS = "class"
    CODE = "code"


def default_grouping(mode: Mode) -> StatusGrouping:
    """Status grouping used when none is configured for a mode."""
    return StatusGrouping.CLASS if mode is Mode.HISTOGRAM else StatusGrouping.CODE


def status_label(status_code: int, grouping: StatusGrouping) -> str:
    """Return the status label value, e.g. "404" or "4xx"."""
    if grouping is StatusGrouping.CODE:
        return str(status_code)
    return f"{status_code // 100}xx"


def quantile(sorted_samples: list[float], q: float) -> float:
    """Select the q-quantile from ascending samples by nearest rank.

    The value at index ceil(q * n) - 1, clamped to the sample range.

    Raises:
        ValueError: If there are no samples.
    """
    n = len(sorted_samples)
    if n == 0:
        raise ValueError("quantile of empty sample set")
    index = math.ceil(q * n) - 1
    index = min(max(index, 0), n - 1)
    return sorted_samples[index]


class Aggregator:
    """Mutable AggregateState plus the rules for updating it.

    In histogram mode every LabelStats keeps cumulative bucket counts for the
    lifetime of the process. In summary mode sum and count are cumulative
    while samples only hold the records applied since the last
    ``reset_window()``.
    """

    def __init__(
        self,
        mode: Mode = Mode.HISTOGRAM,
        grouping: StatusGrouping | None = None,
        buckets: list[float] | None = None,
    ) -> None:
        self.mode = mode
        self.grouping = grouping if grouping is not None else default_grouping(mode)
        self.buckets = list(buckets if buckets is not None else HISTOGRAM_BUCKETS)
        self.state: dict[LabelKey, LabelStats] = {}

    def label_key(self, record: LogRecord) -> LabelKey:
        return LabelKey(
            method=record.method,
            path=record.path,
            status=status_label(record.status_code, self.grouping),
            host=record.host,
        )

    def apply(self, record: LogRecord) -> LabelKey:
        """Add one record to the state and return the key it landed under."""
        key = self.label_key(record)
        stats = self.state.get(key)
        if stats is None:
            stats = LabelStats(buckets=[0] * len(self.buckets))
            self.state[key] = stats

        value = record.request_time
        stats.sum += value
        stats.count += 1
        if self.mode is Mode.HISTOGRAM:
            for i, bound in enumerate(self.buckets):
                if value <= bound:
                    stats.buckets[i] += 1
        else:
            stats.samples.append(value)
        return key

    def quantiles(
        self, quantiles: list[float] | None = None
    ) -> dict[LabelKey, list[tuple[float, float]]]:
        """Compute quantiles over the current scrape window.

        Keys without samples in this window are omitted.

        Returns:
            Mapping of LabelKey to (quantile, value) pairs.
        """
        qs = quantiles if quantiles is not None else SUMMARY_QUANTILES
        result: dict[LabelKey, list[tuple[float, float]]] = {}
        for key, stats in self.state.items():
            if not stats.samples:
                continue
            ordered = sorted(stats.samples)
            result[key] = [(q, quantile(ordered, q)) for q in qs]
        return result

    def reset_window(self) -> None:
        """Discard the per-scrape samples, keeping cumulative sum and count."""
        for stats in self.state.values():
            stats.samples.clear()
