"""
InventHub FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventhub.config import settings
from inventhub.db import Database
from inventhub.errors import DataIntegrityError, InventHubError
from inventhub.routes import auth_routes
from inventhub.routes import files as file_routes
from inventhub.routes import inventions as invention_routes
from inventhub.routes import stats as stats_routes
from inventhub.services.file_storage import LocalFileStorage

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the database pool on startup and close it on shutdown.
    """
    db: Database = app.state.db
    await db.connect()
    yield
    await db.close()


async def _handle_app_error(request: Request, exc: InventHubError) -> JSONResponse:
    if isinstance(exc, DataIntegrityError):
        logger.error("Data integrity violation on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=exc.headers,
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request.")
    return JSONResponse(
        status_code=400,
        content={"message": f"{location}: {message}" if location else message},
    )


async def _handle_database_error(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    logger.exception("Database failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal storage error."})


def create_app(db: Database | None = None, file_storage: LocalFileStorage | None = None) -> FastAPI:
    """
    Build the application around an explicit Database handle.

    Tests pass their own handle; the server builds one from settings.
    """
    app = FastAPI(
        title="InventHub",
        lifespan=lifespan,
    )
    app.state.db = db or Database(
        settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=settings.DB_COMMAND_TIMEOUT,
    )
    app.state.file_storage = file_storage or LocalFileStorage()

    app.add_exception_handler(InventHubError, _handle_app_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(asyncpg.PostgresError, _handle_database_error)

    # Register routes
    app.include_router(auth_routes.router)
    app.include_router(invention_routes.router)
    app.include_router(file_routes.router)
    app.include_router(stats_routes.router)

    @app.get("/health")
    async def health():
        """Health check endpoint for uptime monitoring."""
        return {"status": "ok"}

    return app


app = create_app()
