"""Python logging setup for the exporter process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ExporterStreamHandler(logging.StreamHandler):
    """Stream handler installed by configure_logging()."""


def configure_logging(level: str = "info", logger_name: str = "nginx_exporter") -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Level name, case-insensitive (e.g. "debug", "INFO").
        logger_name: Logger to configure (default: the package logger).

    Returns:
        The configured logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level!r}")

    logger = logging.getLogger(logger_name)
    logger.setLevel(numeric)
    # Replace our own handler on reconfiguration instead of stacking them
    for handler in list(logger.handlers):
        if isinstance(handler, ExporterStreamHandler):
            logger.removeHandler(handler)
    handler = ExporterStreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
