"""Command-line entry point.

Run with:
    nginx-log-exporter --log-path '/var/log/nginx/*.log' --port 9090

Endpoints:
    /metrics    - Prometheus text format request duration metrics
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

import uvicorn

from nginx_exporter import __version__
from nginx_exporter.adapters.frameworks.asgi import create_asgi_app
from nginx_exporter.adapters.logging import configure_logging
from nginx_exporter.config import ExporterConfig
from nginx_exporter.coordinator import ScrapeCoordinator
from nginx_exporter.core.aggregation import Mode, StatusGrouping

logger = logging.getLogger(__name__)


def build_parser(defaults: ExporterConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nginx-log-exporter",
        description="Prometheus exporter for nginx JSON access logs",
    )
    parser.add_argument("-l", "--log-path", default=defaults.log_path,
                        help="glob pattern of access log files (default: %(default)s)")
    parser.add_argument("-p", "--port", type=int, default=defaults.port,
                        help="HTTP port (default: %(default)s)")
    parser.add_argument("--host", default=defaults.host,
                        help="bind address (default: %(default)s)")
    parser.add_argument("--mode", choices=[m.value for m in Mode], default=defaults.mode.value,
                        help="exposition variant (default: %(default)s)")
    parser.add_argument("--status-grouping", choices=[g.value for g in StatusGrouping],
                        default=None,
                        help="label by exact status code or by class (default: per mode)")
    parser.add_argument("--log-level", default=defaults.log_level,
                        help="exporter log level (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_config(argv: Sequence[str] | None = None) -> ExporterConfig:
    """Merge environment defaults and command-line flags into a config."""
    try:
        defaults = ExporterConfig.from_env()
    except ValueError as e:
        raise SystemExit(f"nginx-log-exporter: invalid environment: {e}") from None

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    grouping = args.status_grouping
    if grouping is None and os.environ.get("NGINX_EXPORTER_STATUS_GROUPING"):
        grouping = defaults.status_grouping
    try:
        return ExporterConfig(
            log_path=args.log_path,
            host=args.host,
            port=args.port,
            mode=Mode(args.mode),
            status_grouping=grouping,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))


def main(argv: Sequence[str] | None = None) -> None:
    config = parse_config(argv)
    configure_logging(config.log_level)

    logger.info("Starting Nginx Prometheus Exporter")
    logger.info(f"Log file: {config.log_path!r} (mode: {config.mode.value})")

    app = create_asgi_app(ScrapeCoordinator(config))
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)


if __name__ == "__main__":
    main()
