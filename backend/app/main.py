"""FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adrevenue.services.errors import RecordSourceError, ReportError
from app.routes import health, revenue
from config import Settings, get_settings
from db.connection import init_database

logger: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = get_settings()
    logger.info("DB: %s", settings.database.db_info_for_logging())

    init_database()
    yield


def install_error_handlers(app: FastAPI) -> None:
    """Render pipeline errors as ``{"error": message}`` with their status."""

    @app.exception_handler(ReportError)
    async def _on_report_error(request: Request, exc: ReportError) -> JSONResponse:
        if isinstance(exc, RecordSourceError):
            logger.error(
                "Store query failed for %s?%s: %s",
                request.url.path,
                request.url.query,
                exc.detail,
                exc_info=exc,
            )
        elif exc.status_code >= 400:
            logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def _on_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error for %s?%s: %s", request.url.path, request.url.query, exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    settings: Settings = get_settings()
    app: FastAPI = FastAPI(
        title="Ad Platform Revenue Reporting",
        version="0.1.0",
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(revenue.router)

    return app


app: FastAPI = create_app()


def start() -> None:
    """Entry point for adrevenue-api."""
    backend_root: Path = Path(__file__).resolve().parent.parent
    os.chdir(backend_root)

    for candidate in (backend_root / ".env", backend_root.parent / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=False)

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reload: bool = os.environ.get("ADREVENUE_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=reload,
    )
