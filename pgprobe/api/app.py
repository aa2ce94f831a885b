"""FastAPI application factory for the pgprobe API."""

from __future__ import annotations

from fastapi import FastAPI

from pgprobe.api.routers.connections import router as connections_router
from pgprobe.api.routers.health import router as health_router
from pgprobe.config import get_settings

API_V1_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    """Create the FastAPI application instance."""

    app = FastAPI(
        title=f"{get_settings().app_name} API",
        version="0.1.0",
    )

    app.include_router(health_router, prefix=API_V1_PREFIX, tags=["health"])
    app.include_router(connections_router, prefix=API_V1_PREFIX, tags=["connections"])
    return app


# Uvicorn default import target: `uvicorn pgprobe.api.app:app`
app = create_app()
