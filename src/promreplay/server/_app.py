"""
promreplay scrape application
"""

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

from promreplay import __version__

from .models import HealthResponse


def create_app(registry: CollectorRegistry = REGISTRY) -> FastAPI:
    """Build the FastAPI application exposing ``registry``.

    Args:
        registry: Registry rendered by the /metrics endpoint

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title="promreplay",
        description="Replays synthetic gauge values for Prometheus scrapes",
        version=__version__,
        docs_url=None,  # Disable default /docs
        redoc_url=None,  # Disable default /redoc
    )

    @app.get("/metrics", tags=["Metrics"])
    async def metrics() -> Response:
        """Scrape endpoint

        Returns:
            Response: Current values of every registered metric in the
            Prometheus text exposition format
        """
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint

        Returns:
            HealthResponse: Always returns {"status": "ok"}
        """
        return HealthResponse()

    return app
