"""Optimistic locking bookkeeping.

Lock values are incremented in memory before the statement is built so each
value tuple carries the new value. The previous values are kept in a ledger so
records whose row did not advance, or a whole batch whose statement failed, can
be put back exactly as they were.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from batchupdate.domain.ports import UpdatableRecord

type LockLedger = dict[Hashable, int | None]


def increment_lock(record: UpdatableRecord) -> int | None:
    """Bump the record's lock value by one and return the value it had before."""

    previous = record.get_lock_value()
    record.set_lock_value((previous or 0) + 1)
    return previous


def prepare_locks(
    records: Iterable[UpdatableRecord],
    ledger: LockLedger,
    *,
    locking_enabled: bool,
) -> None:
    if not locking_enabled:
        return
    for record in records:
        ledger[record.primary_key_value()] = increment_lock(record)


def restore_locks(records: Iterable[UpdatableRecord], ledger: LockLedger) -> None:
    """Reset the lock value of every record found in ``ledger``."""

    if not ledger:
        return
    for record in records:
        key = record.primary_key_value()
        if key in ledger:
            record.set_lock_value(ledger[key])
