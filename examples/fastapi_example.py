"""Example FastAPI application embedding the access log exporter.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /metrics    - Prometheus text format request duration metrics
    /           - Application endpoint

nginx must write JSON access logs, for example:

    log_format json_combined escape=json
      '{"nginx":{"access":{"method":"$request_method","url":"$uri","host":"$host"},'
      '"time":{"request":"$request_time"}},'
      '"http":{"response":{"status_code":"$status"}}}';
    access_log /var/log/nginx/access.log json_combined;
"""

from fastapi import FastAPI

from nginx_exporter.adapters.frameworks.fastapi import create_metrics_router
from nginx_exporter.config import ExporterConfig
from nginx_exporter.coordinator import ScrapeCoordinator

config = ExporterConfig.from_env()
coordinator = ScrapeCoordinator(config)

app = FastAPI(title="Access Log Exporter Example")
app.include_router(create_metrics_router(coordinator))


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"log_path": config.log_path, "mode": config.mode.value}
