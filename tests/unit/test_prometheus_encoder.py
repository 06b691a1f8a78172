"""Tests for the Prometheus text exposition encoder."""

import pytest
from prometheus_client.parser import text_string_to_metric_families

from nginx_exporter.core.aggregation import HISTOGRAM_BUCKETS, Aggregator, Mode
from nginx_exporter.core.encoding.prometheus import (
    encode_counters,
    encode_histogram,
    encode_summary,
    escape_label_value,
    format_value,
)
from nginx_exporter.core.models import LabelKey, LabelStats, LogRecord, ScrapeCounters

NAME = "nginx_http_request_duration_seconds"

pytestmark = [pytest.mark.encoding, pytest.mark.tier(0)]


class TestEscaping:
    """Tests for label value escaping."""

    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("/plain", "/plain"),
            ('/a"b', '/a\\"b'),
            ("C:\\dir", "C:\\\\dir"),
            ("two\nlines", "two\\nlines"),
        ],
    )
    def test_escape_label_value(self, raw: str, escaped: str) -> None:
        assert escape_label_value(raw) == escaped


class TestFormatValue:
    """Tests for sample value rendering."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3, "3"),
            (0.005, "0.005"),
            (2.56, "2.56"),
            (float("inf"), "+Inf"),
            (float("-inf"), "-Inf"),
            (float("nan"), "NaN"),
        ],
    )
    def test_format_value(self, value: float, expected: str) -> None:
        assert format_value(value) == expected


class TestEncodeHistogram:
    """Tests for histogram exposition."""

    def test_empty_state_renders_headers_only(self) -> None:
        result = encode_histogram(NAME, {}, HISTOGRAM_BUCKETS)

        assert result == (
            f"# HELP {NAME} Request duration in seconds\n"
            f"# TYPE {NAME} histogram\n"
        )

    def test_series_layout(self) -> None:
        """Buckets in ascending order, then +Inf, _sum and _count."""
        aggregator = Aggregator()
        aggregator.apply(LogRecord("GET", "/", 200, "h", 0.03))

        lines = encode_histogram(NAME, aggregator.state, aggregator.buckets).splitlines()

        labels = 'method="GET",path="/",status_code="2xx",host="h"'
        assert lines[2] == f'{NAME}_bucket{{{labels},le="0.005"}} 0'
        assert lines[5] == f'{NAME}_bucket{{{labels},le="0.04"}} 1'
        assert lines[11] == f'{NAME}_bucket{{{labels},le="2.56"}} 1'
        assert lines[12] == f'{NAME}_bucket{{{labels},le="+Inf"}} 1'
        assert lines[13] == f"{NAME}_sum{{{labels}}} 0.03"
        assert lines[14] == f"{NAME}_count{{{labels}}} 1"
        assert len(lines) == 15

    def test_output_is_sorted_and_deterministic(self) -> None:
        """Keys render in sorted order regardless of insertion order."""
        state = {
            LabelKey("POST", "/b", "2xx", "h"): LabelStats(1.0, 1, [0] * 10),
            LabelKey("GET", "/a", "2xx", "h"): LabelStats(2.0, 1, [0] * 10),
        }
        reordered = dict(reversed(list(state.items())))

        first = encode_histogram(NAME, state, HISTOGRAM_BUCKETS)
        second = encode_histogram(NAME, reordered, HISTOGRAM_BUCKETS)

        assert first == second
        assert first.index('method="GET"') < first.index('method="POST"')

    def test_round_trips_through_standard_parser(self) -> None:
        """Escaped label values parse back to the unescaped strings."""
        aggregator = Aggregator()
        path = '/search?q="quoted"\\x'
        aggregator.apply(LogRecord("GET", path, 200, "h", 0.2))
        aggregator.apply(LogRecord("GET", path, 200, "h", 0.4))

        text = encode_histogram(NAME, aggregator.state, aggregator.buckets)
        families = list(text_string_to_metric_families(text))

        assert len(families) == 1
        samples = families[0].samples
        assert {s.labels["path"] for s in samples} == {path}
        inf = [s for s in samples if s.labels.get("le") == "+Inf"]
        assert inf[0].value == 2
        total = [s for s in samples if s.name == f"{NAME}_sum"]
        assert total[0].value == pytest.approx(0.6)


class TestEncodeSummary:
    """Tests for summary exposition."""

    def test_sum_count_and_quantiles(self) -> None:
        aggregator = Aggregator(Mode.SUMMARY)
        for value in [0.25, 0.5, 0.75, 1.0]:
            aggregator.apply(LogRecord("GET", "/", 200, "h", value))

        text = encode_summary(NAME, aggregator.state, aggregator.quantiles())

        labels = 'method="GET",path="/",status_code="200",host="h"'
        lines = text.splitlines()
        assert lines[1] == f"# TYPE {NAME} summary"
        assert lines[2] == f"{NAME}_sum{{{labels}}} 2.5"
        assert lines[3] == f"{NAME}_count{{{labels}}} 4"
        assert lines[4] == f'{NAME}{{{labels},quantile="0.5"}} 0.5'
        assert lines[7] == f'{NAME}{{{labels},quantile="0.99"}} 1.0'

    def test_no_quantiles_without_window(self) -> None:
        """Keys without new samples report only _sum and _count."""
        aggregator = Aggregator(Mode.SUMMARY)
        aggregator.apply(LogRecord("GET", "/", 200, "h", 0.1))
        aggregator.reset_window()

        text = encode_summary(NAME, aggregator.state, aggregator.quantiles())

        assert "quantile=" not in text
        assert f"{NAME}_count" in text

    def test_parses_as_summary(self) -> None:
        aggregator = Aggregator(Mode.SUMMARY)
        aggregator.apply(LogRecord("GET", "/", 200, "h", 0.25))

        text = encode_summary(NAME, aggregator.state, aggregator.quantiles())
        families = list(text_string_to_metric_families(text))

        assert families[0].type == "summary"
        quantiles = {
            s.labels["quantile"]: s.value
            for s in families[0].samples
            if "quantile" in s.labels
        }
        assert quantiles == {"0.5": 0.25, "0.9": 0.25, "0.95": 0.25, "0.99": 0.25}


class TestEncodeCounters:
    """Tests for the exporter's own counters."""

    def test_counters(self) -> None:
        counters = ScrapeCounters(lines_read=5, parse_errors=2, file_errors=1, rotations=3)

        text = encode_counters(counters)

        assert "# TYPE nginx_exporter_parse_errors_total counter\n" in text
        assert "nginx_exporter_lines_read_total 5\n" in text
        assert "nginx_exporter_parse_errors_total 2\n" in text
        assert "nginx_exporter_file_errors_total 1\n" in text
        assert "nginx_exporter_rotations_total 3\n" in text
