"""Batch update pipeline."""

from __future__ import annotations

from .changeset import ColumnSet, changed_columns, ensure_unique_keys, select_dirty
from .engine import BatchUpdater
from .locking import LockLedger, increment_lock, prepare_locks, restore_locks
from .quoting import quote, typecast
from .statement import sql_for_update_records
from .validation import validate_records

__all__ = [
    "BatchUpdater",
    "ColumnSet",
    "LockLedger",
    "changed_columns",
    "ensure_unique_keys",
    "increment_lock",
    "prepare_locks",
    "quote",
    "restore_locks",
    "select_dirty",
    "sql_for_update_records",
    "typecast",
    "validate_records",
]
