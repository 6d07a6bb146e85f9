"""Errors raised by the batch update engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from batchupdate.domain.ports import UpdatableRecord


class BatchUpdateError(Exception):
    """Base class for batch update failures."""


class BatchArgumentError(BatchUpdateError, ValueError):
    """Raised when an internal synthesis step receives an unusable argument."""


class RecordInvalidError(BatchUpdateError):
    """Raised in strict mode when a record fails validation; nothing was written."""

    def __init__(self, record: UpdatableRecord) -> None:
        super().__init__(f"Validation failed for record {record.primary_key_value()!r}")
        self.record = record


class StaleRecordError(BatchUpdateError):
    """Raised in strict mode when a record lost an optimistic locking race.

    The other valid records of the batch have already been written.
    """

    def __init__(self, record: UpdatableRecord) -> None:
        super().__init__(
            f"Attempted to update a stale record {record.primary_key_value()!r}"
        )
        self.record = record
