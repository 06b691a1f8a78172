"""Prometheus text exposition format encoder."""

import math
from collections.abc import Mapping

from nginx_exporter.core.models import LabelKey, LabelStats, ScrapeCounters

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def escape_label_value(value: str) -> str:
    """Escape a label value per the exposition text grammar.

    Backslash, double quote and line feed are the only escaped characters.
    """
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: float) -> str:
    """Render a sample value.

    Integral counts render without a decimal point; infinities and NaN use
    the spellings the text format expects.
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(value)


def _labels(key: LabelKey, extra: tuple[str, str] | None = None) -> str:
    pairs = [
        ("method", key.method),
        ("path", key.path),
        ("status_code", key.status),
        ("host", key.host),
    ]
    if extra is not None:
        pairs.append(extra)
    return ",".join(f'{name}="{escape_label_value(value)}"' for name, value in pairs)


def _header(name: str, help_text: str, metric_type: str) -> list[str]:
    return [f"# HELP {name} {help_text}", f"# TYPE {name} {metric_type}"]


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def encode_histogram(
    name: str,
    state: Mapping[LabelKey, LabelStats],
    buckets: list[float],
) -> str:
    """Encode cumulative histograms for every label combination.

    Args:
        name: Metric family name, e.g. nginx_http_request_duration_seconds.
        state: AggregateState to render.
        buckets: Finite bucket bounds, ascending. +Inf is always appended.

    Returns:
        Text with one HELP/TYPE header, then per key the _bucket lines in
        ascending bound order followed by _sum and _count. Keys are sorted
        so unchanged state renders identically.
    """
    lines = _header(name, "Request duration in seconds", "histogram")
    for key in sorted(state):
        stats = state[key]
        for bound, bucket_count in zip(buckets, stats.buckets):
            labels = _labels(key, ("le", format_value(bound)))
            lines.append(f"{name}_bucket{{{labels}}} {bucket_count}")
        labels = _labels(key, ("le", "+Inf"))
        lines.append(f"{name}_bucket{{{labels}}} {stats.count}")
        lines.append(f"{name}_sum{{{_labels(key)}}} {format_value(stats.sum)}")
        lines.append(f"{name}_count{{{_labels(key)}}} {stats.count}")
    return _join(lines)


def encode_summary(
    name: str,
    state: Mapping[LabelKey, LabelStats],
    quantiles: Mapping[LabelKey, list[tuple[float, float]]],
) -> str:
    """Encode summaries: cumulative _sum/_count plus per-scrape quantiles.

    Quantile lines are only emitted for keys present in ``quantiles``.
    """
    lines = _header(name, "Request duration in seconds", "summary")
    for key in sorted(state):
        stats = state[key]
        lines.append(f"{name}_sum{{{_labels(key)}}} {format_value(stats.sum)}")
        lines.append(f"{name}_count{{{_labels(key)}}} {stats.count}")
        for q, value in quantiles.get(key, []):
            labels = _labels(key, ("quantile", format_value(q)))
            lines.append(f"{name}{{{labels}}} {format_value(value)}")
    return _join(lines)


def encode_counters(counters: ScrapeCounters, prefix: str = "nginx_exporter") -> str:
    """Encode the exporter's own counters."""
    families = [
        ("lines_read_total", "Log lines read", counters.lines_read),
        ("parse_errors_total", "Log lines that failed to parse", counters.parse_errors),
        ("file_errors_total", "Log file read failures", counters.file_errors),
        ("rotations_total", "Detected log rotations or truncations", counters.rotations),
    ]
    lines: list[str] = []
    for suffix, help_text, value in families:
        name = f"{prefix}_{suffix}"
        lines.extend(_header(name, help_text, "counter"))
        lines.append(f"{name} {value}")
    return _join(lines)
