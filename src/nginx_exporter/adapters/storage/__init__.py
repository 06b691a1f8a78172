"""Storage adapters for read positions."""

from nginx_exporter.adapters.storage.in_memory import InMemoryPositionStore

__all__ = [
    "InMemoryPositionStore",
]
