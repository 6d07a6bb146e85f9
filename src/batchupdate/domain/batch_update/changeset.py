"""Collect dirty records and the union of their changed columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from batchupdate.domain.errors import BatchArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from batchupdate.domain.ports import UpdatableRecord

type ColumnSet = tuple[str, ...]


def select_dirty[TRecord: UpdatableRecord](records: Iterable[TRecord]) -> list[TRecord]:
    """Return the records that are persisted and have at least one changed attribute."""

    return [
        record
        for record in records
        if not record.is_new() and record.changed_attribute_names()
    ]


def ensure_unique_keys(records: Iterable[UpdatableRecord]) -> None:
    """Reject a batch naming the same primary key twice.

    One row would be matched by two value tuples, and the lock ledger holds a
    single previous value per key.
    """

    seen: set[object] = set()
    for record in records:
        key = record.primary_key_value()
        if key in seen:
            raise BatchArgumentError(f"Duplicate primary key {key!r} given")
        seen.add(key)


def changed_columns(
    records: Sequence[UpdatableRecord],
    *,
    primary_key: str,
    timestamp_column: str,
    locking_column: str | None = None,
) -> ColumnSet:
    """Return the union of changed attribute names across ``records``.

    The union is sorted by name so every part of the statement agrees on one
    ordering. The timestamp column and, when locking, the locking column are
    appended last. An empty tuple means there is nothing to update.
    """

    changed: set[str] = set()
    for record in records:
        changed.update(record.changed_attribute_names())
    if not changed:
        return ()

    bookkeeping = {primary_key, timestamp_column}
    if locking_column is not None:
        bookkeeping.add(locking_column)

    columns = [name for name in sorted(changed) if name not in bookkeeping]
    columns.append(timestamp_column)
    if locking_column is not None:
        columns.append(locking_column)
    return tuple(columns)
