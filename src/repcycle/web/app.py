"""FastAPI application for the repcycle JSON API."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..data.catalog import seed_exercises
from ..errors import ProgramValidationError, StorageNotInitializedError
from ..observability import configure_logging
from ..services.context import AppContext, open_context
from .routers import exercises, plans, sessions, sync

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the SQLite-backed context unless one was injected."""
    if getattr(app.state, "context", None) is None:
        context = await open_context()
        await seed_exercises(context.store)
        app.state.context = context
    logger.info("api_started")
    yield


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Prebuilt services, used instead of the on-disk database
    """
    configure_logging()
    app = FastAPI(
        title="repcycle",
        description="Strength plan generator with session cycling and Strava sync",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    app.include_router(exercises.router)
    app.include_router(plans.router)
    app.include_router(sessions.router)
    app.include_router(sync.router)

    @app.exception_handler(ProgramValidationError)
    async def program_validation_handler(request: Request, exc: ProgramValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StorageNotInitializedError)
    async def storage_handler(request: Request, exc: StorageNotInitializedError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
