"""SQLAlchemy adapter package for batchupdate."""

from __future__ import annotations

from .gateway import SqlAlchemyTableGateway
from .records import InstanceValidator, OrmRecord
from .repositories import SqlAlchemyBatchUpdateRepository
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "InstanceValidator",
    "OrmRecord",
    "SqlAlchemyBatchUpdateRepository",
    "SqlAlchemyTableGateway",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "shutdown",
    "startup",
]
