from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from batchupdate.common.logging import configure_logging
from tests.helpers.clock import FixedClock
from tests.helpers.models import metadata, start_mappers
from tests.helpers.schema import FakeTableSchema

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    configure_logging(level=logging.DEBUG, force=True)


@pytest.fixture(scope="session", autouse=True)
def _mappers() -> None:
    start_mappers()


@pytest.fixture
def schema() -> FakeTableSchema:
    return FakeTableSchema()


@pytest.fixture
def locking_schema() -> FakeTableSchema:
    return FakeTableSchema(locking_column="lock_version")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
