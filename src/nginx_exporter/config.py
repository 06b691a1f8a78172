"""Configuration for the exporter.

This module defines the configuration dataclass consumed by the scrape
coordinator and the CLI: which files to tail, where to listen, and which
exposition variant to produce.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from nginx_exporter.core.aggregation import Mode, StatusGrouping, default_grouping
from nginx_exporter.core.parsing import FieldMapping

DEFAULT_LOG_PATH = "/var/log/nginx/*.log"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9090
DEFAULT_METRIC_NAME = "nginx_http_request_duration_seconds"
ENV_PREFIX = "NGINX_EXPORTER_"
# Names accepted by both the logging module and uvicorn
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


@dataclass(frozen=True)
class ExporterConfig:
    """Configuration for the exporter.

    Attributes:
        log_path: Glob pattern or path of the JSON access logs (default: /var/log/nginx/*.log).
        host: Address the HTTP server binds to (default: 0.0.0.0).
        port: HTTP port (default: 9090).
        mode: histogram or summary exposition (default: histogram).
        status_grouping: Exact status code or its class; None picks the
            mode's default (class for histogram, code for summary).
        metric_name: Name of the request duration metric family.
        fields: JSON keys the record fields are read from.
        log_level: Level name for the exporter's own logging (default: info).

    Raises:
        ValueError: If mode, status_grouping, port or log_level is invalid.
    """

    log_path: str = DEFAULT_LOG_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    mode: Mode = Mode.HISTOGRAM
    status_grouping: StatusGrouping | None = None
    metric_name: str = DEFAULT_METRIC_NAME
    fields: FieldMapping = field(default_factory=FieldMapping)
    log_level: str = "info"

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "mode", Mode(self.mode))
        grouping = self.status_grouping
        if grouping is None:
            grouping = default_grouping(self.mode)
        object.__setattr__(self, "status_grouping", StatusGrouping(grouping))
        if not 0 < int(self.port) < 65536:
            raise ValueError(f"port out of range: {self.port}")
        object.__setattr__(self, "port", int(self.port))
        if not self.log_path:
            raise ValueError("log_path must not be empty")
        level = self.log_level.lower()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"unknown log level: {self.log_level!r} (expected one of {', '.join(LOG_LEVELS)})"
            )
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExporterConfig:
        """Build a config from NGINX_EXPORTER_* variables and LOG_LEVEL.

        Args:
            environ: Variables to read (default: os.environ).
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        for name in ("log_path", "host", "port", "mode", "status_grouping"):
            value = env.get(ENV_PREFIX + name.upper())
            if value:
                kwargs[name] = value
        if "port" in kwargs:
            try:
                kwargs["port"] = int(str(kwargs["port"]))
            except ValueError:
                raise ValueError(f"port is not an integer: {kwargs['port']!r}") from None
        if env.get("LOG_LEVEL"):
            kwargs["log_level"] = env["LOG_LEVEL"]
        return cls(**kwargs)  # type: ignore[arg-type]
