"""Shared fixtures: in-memory SQLite DB with all tables."""

from collections.abc import Generator
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from adrevenue.services.sources import RecordSource
from db.models import Base

# Fixed "now" for tests that depend on the current month.
NOW: datetime = datetime(2024, 6, 15, 10, 30, 0)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    eng: Engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine: Engine) -> Generator[Session, None, None]:
    factory: sessionmaker[Session] = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    sess: Session = factory()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture()
def source(session: Session) -> RecordSource:
    return RecordSource(session, max_rows=100, batch_size=10)


@pytest.fixture()
def now() -> datetime:
    return NOW
