# app/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..db import create_all
from ..logging_config import configure_logging
from .api.middleware import RequestLoggingMiddleware
from .api.routers import health, heatmap, jobs, rentals


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="RentGrid - Manhattan Rent Heat Map")

    @app.on_event("startup")
    async def _startup() -> None:
        # Single place where DB tables are created in dev.
        await create_all()

    app.add_middleware(RequestLoggingMiddleware)

    # Routers
    app.include_router(health.router)
    app.include_router(heatmap.router)
    app.include_router(rentals.router)
    app.include_router(jobs.router)

    return app
