"""Run the synthesized statement and reconcile its outcome with the records."""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING

from batchupdate.domain.errors import StaleRecordError
from batchupdate.domain.model import UpdateResult

from .quoting import typecast

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from batchupdate.domain.ports import TableSchema, UpdatableRecord


def perform_update_records_query(sql: str, schema: TableSchema) -> tuple[Hashable, ...]:
    """Execute ``sql`` and return the primary keys of the rows it updated."""

    primary_key = schema.primary_key
    sql_type = schema.sql_type_of(primary_key)
    rows = schema.execute(sql)
    return tuple(typecast(sql_type, row[primary_key]) for row in rows)  # type: ignore[misc]


def extract_stale_records[TRecord: UpdatableRecord](
    records: Sequence[TRecord],
    updated_ids: Sequence[Hashable],
    *,
    locking_enabled: bool,
) -> list[TRecord]:
    """Return the records the database did not confirm.

    Without locking every valid record matches its own primary key, so a missing
    id is not a locking conflict and nothing is reported as stale.
    """

    if not locking_enabled:
        return []
    confirmed = set(updated_ids)
    return [record for record in records if record.primary_key_value() not in confirmed]


def build_result[TRecord: UpdatableRecord](
    valid: Sequence[TRecord],
    failed: Sequence[TRecord],
    updated_ids: Sequence[Hashable],
    *,
    locking_enabled: bool,
) -> UpdateResult[TRecord]:
    stale = extract_stale_records(valid, updated_ids, locking_enabled=locking_enabled)
    return UpdateResult(
        updated_ids=tuple(updated_ids),
        failed_records=tuple(failed),
        stale_records=tuple(stale),
    )


def validate_result[TRecord: UpdatableRecord](
    result: UpdateResult[TRecord],
    *,
    raise_on_stale: bool,
) -> None:
    if raise_on_stale and result.stale_records:
        raise StaleRecordError(result.stale_records[0])


def confirmed_records[TRecord: UpdatableRecord](
    valid: Sequence[TRecord],
    result: UpdateResult[TRecord],
) -> list[TRecord]:
    """Return the valid records whose row was returned and that are not stale."""

    confirmed = set(result.updated_ids)
    stale = {id(record) for record in result.stale_records}
    return [
        record
        for record in valid
        if id(record) not in stale and record.primary_key_value() in confirmed
    ]


def update_timestamp(
    records: Iterable[UpdatableRecord],
    timestamp: datetime,
    *,
    timestamp_column: str,
) -> None:
    for record in records:
        record.set_attribute(timestamp_column, timestamp)


def mark_changes_applied(records: Iterable[UpdatableRecord]) -> None:
    for record in records:
        record.mark_persisted()
