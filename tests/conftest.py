"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from pathlib import Path

import pytest

from tests.helpers import make_line

try:
    import httpx
except ImportError:
    httpx = None


@pytest.fixture
def log_line() -> Callable[..., str]:
    """Factory fixture for access log lines."""
    return make_line


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Provide an empty access log file in a temporary directory."""
    path = tmp_path / "access.log"
    path.write_bytes(b"")
    return path


@pytest.fixture
def append(log_file: Path) -> Callable[[str | bytes], None]:
    """Fixture returning a function that appends text or bytes to log_file."""

    def _append(data: str | bytes) -> None:
        if isinstance(data, str):
            data = data.encode()
        with log_file.open("ab") as f:
            f.write(data)

    return _append


@pytest.fixture
def coordinator_factory(log_file: Path):
    """Factory fixture creating a ScrapeCoordinator over log_file."""
    from nginx_exporter.config import ExporterConfig
    from nginx_exporter.coordinator import ScrapeCoordinator

    def _create(**overrides):
        overrides.setdefault("log_path", str(log_file))
        return ScrapeCoordinator(ExporterConfig(**overrides))

    return _create


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(coordinator)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
