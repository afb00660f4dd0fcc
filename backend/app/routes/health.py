"""Health endpoints."""

import logging
import os

from fastapi import APIRouter, Depends
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from adrevenue.services._types import DbInfoDict
from app.dependencies import require_admin
from app.schemas.common import HealthResponse
from config import DatabaseSettings, get_settings
from db.connection import get_engine
from db.models import Base

logger: logging.Logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(tags=["health"])


def get_db_info() -> DbInfoDict:
    """Gather DB info. Never raises."""
    try:
        db: DatabaseSettings = get_settings().database

        if db._use_postgres():
            backend_type: str = "postgres"
            url_or_path: str | None = db._redacted_postgres_dsn()
        else:
            backend_type = "sqlite"
            url_or_path = db._resolved_sqlite_path().as_posix()

        engine: Engine = get_engine()
        existing: set[str] = set()
        try:
            existing = set(inspect(engine).get_table_names())
        except Exception as e:
            logger.warning("Could not inspect DB: %s", e)

        expected: set[str] = set(Base.metadata.tables)
        return DbInfoDict(
            backend_type=backend_type,
            database_url_or_path=url_or_path,
            tables_present=sorted(existing & expected),
            tables_missing=sorted(expected - existing),
            schema_initialized=expected <= existing,
            pid=os.getpid(),
        )
    except Exception as e:
        logger.exception("Health DB check failed: %s", e)
        return DbInfoDict(
            backend_type="unknown",
            database_url_or_path=None,
            tables_present=[],
            tables_missing=[],
            schema_initialized=False,
            error=str(e),
            pid=os.getpid(),
        )


@router.get("/health", response_model=HealthResponse)
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/db", dependencies=[Depends(require_admin)])
def health_db() -> DbInfoDict:
    return get_db_info()
