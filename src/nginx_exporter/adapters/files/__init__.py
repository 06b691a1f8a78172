"""File tailing adapters."""

from nginx_exporter.adapters.files.tailer import LogTailer, TailResult

__all__ = [
    "LogTailer",
    "TailResult",
]
