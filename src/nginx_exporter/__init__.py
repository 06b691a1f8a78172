"""Prometheus request duration metrics from nginx JSON access logs."""

__version__ = "0.1.0"
