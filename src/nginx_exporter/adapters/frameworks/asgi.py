"""ASGI generic adapter for the metrics endpoint.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne) without requiring FastAPI.
"""

import asyncio
import json
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from nginx_exporter.coordinator import ScrapeCoordinator

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

POWERED_BY = "nginx-prometheus-exporter"


async def _send_response(send: Send, status: int, content_type: str, body: str) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
    """
    headers = [
        (b"content-type", content_type.encode()),
        (b"x-powered-by", POWERED_BY.encode()),
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], Coroutine[Any, Any, str]],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Async function that returns response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = await endpoint_func()
        await _send_response(send, 200, content_type, body)
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)


def create_asgi_app(coordinator: ScrapeCoordinator) -> ASGIApp:
    """Create an ASGI app serving ``GET /metrics``.

    The blocking scrape runs in a worker thread; the coordinator's lock
    serializes concurrent requests. Any other method, HEAD included, gets
    a 404 without touching the log offsets.

    Args:
        coordinator: Scrape coordinator owning the exporter state.

    Returns:
        ASGI application callable.
    """

    async def scrape() -> str:
        return await asyncio.to_thread(coordinator.scrape)

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        if scope["path"] == "/metrics" and scope["method"] == "GET":
            await _handle_endpoint(
                send,
                scrape,
                coordinator.content_type,
                "Error encoding metrics endpoint",
            )
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
