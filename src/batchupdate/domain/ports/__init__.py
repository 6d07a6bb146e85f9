"""Ports implemented by callers and adapters of the batch update engine."""

from __future__ import annotations

from .clock import Clock
from .records import UpdatableRecord
from .schema import ResultRow, TableSchema

__all__ = [
    "Clock",
    "ResultRow",
    "TableSchema",
    "UpdatableRecord",
]
