"""FastAPI adapter for the metrics endpoint."""

from fastapi import APIRouter, Response
from fastapi.concurrency import run_in_threadpool

from nginx_exporter.adapters.frameworks.asgi import POWERED_BY
from nginx_exporter.coordinator import ScrapeCoordinator


def create_metrics_router(coordinator: ScrapeCoordinator) -> APIRouter:
    """Create a FastAPI router with a /metrics endpoint.

    Args:
        coordinator: Scrape coordinator owning the exporter state.

    Returns:
        APIRouter with /metrics configured.
    """
    router = APIRouter()

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Return request duration metrics in Prometheus text format."""
        body = await run_in_threadpool(coordinator.scrape)
        return Response(
            content=body,
            media_type=coordinator.content_type,
            headers={"X-Powered-By": POWERED_BY},
        )

    return router
