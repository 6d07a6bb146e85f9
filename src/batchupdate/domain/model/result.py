"""Outcome of a batch update."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass


@dataclass(frozen=True)
class UpdateResult[TRecord]:
    """Primary keys confirmed by the database plus the records that were not written.

    ``failed_records`` were rejected by validation before any SQL was built.
    ``stale_records`` passed validation but lost an optimistic locking race.
    """

    updated_ids: tuple[Hashable, ...] = ()
    failed_records: tuple[TRecord, ...] = ()
    stale_records: tuple[TRecord, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failed_records and not self.stale_records

    @property
    def has_updates(self) -> bool:
        return bool(self.updated_ids)

    @property
    def has_failed_records(self) -> bool:
        return bool(self.failed_records)

    @property
    def has_stale_records(self) -> bool:
        return bool(self.stale_records)
