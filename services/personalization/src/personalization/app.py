"""FastAPI entrypoint for the personalization service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from common.config import settings
from common.logging import configure_logging, get_logger

from .errors import PipelineError
from .routes.admin import router as admin_router
from .routes.positions import positioning_router
from .routes.positions import router as positions_router
from .routes.publication import router as publication_router
from .routes.realtime import router as realtime_router

configure_logging()
LOGGER = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info(
        "Personalization service starting",
        environment=settings.environment,
        events_enabled=settings.events_enabled,
        validation_bypass=settings.allow_validation_bypass,
    )
    yield
    LOGGER.info("Personalization service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Podmarket Personalization Service",
        description="Design placement and product publication workflow",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(positions_router)
    app.include_router(positioning_router)
    app.include_router(publication_router)
    app.include_router(admin_router)
    app.include_router(realtime_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Readiness probe used by Docker compose."""
        return {"status": "ok"}

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(request: Request, exc: PipelineError):
        LOGGER.info(
            "Request rejected",
            path=request.url.path,
            error=exc.code,
            detail=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "detail": exc.message},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        LOGGER.error("Unexpected error", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    return app


app = create_app()
