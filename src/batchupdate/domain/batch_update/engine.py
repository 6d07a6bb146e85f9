"""Top-level batch update orchestration.

Collect dirty records, validate them, bump lock values, build and run one
statement, then reconcile: stale records get their lock value back and only
confirmed records have their timestamp set and their changes marked applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from batchupdate.common.clock import SystemClock
from batchupdate.config import BatchUpdateConfig
from batchupdate.domain.model import UpdateResult

from .changeset import changed_columns, ensure_unique_keys, select_dirty
from .execution import (
    build_result,
    confirmed_records,
    mark_changes_applied,
    perform_update_records_query,
    update_timestamp,
    validate_result,
)
from .locking import LockLedger, prepare_locks, restore_locks
from .statement import sql_for_update_records
from .validation import validate_records

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from batchupdate.domain.ports import Clock, TableSchema, UpdatableRecord


log = getLogger(__name__)


@dataclass(slots=True)
class BatchUpdater:
    """Update every changed record of one table with a single statement."""

    schema: TableSchema
    config: BatchUpdateConfig = field(default_factory=BatchUpdateConfig)
    clock: Clock | None = None

    def update_records[TRecord: UpdatableRecord](
        self, records: Iterable[TRecord]
    ) -> UpdateResult[TRecord]:
        """Best-effort update: invalid and stale records are reported, never raised."""

        return self._update_records(
            records,
            raise_on_validation_failure=False,
            raise_on_stale_records=False,
        )

    def update_records_strict[TRecord: UpdatableRecord](
        self, records: Iterable[TRecord]
    ) -> UpdateResult[TRecord]:
        """Strict update.

        Raises ``RecordInvalidError`` for the first invalid record before anything
        is written, and ``StaleRecordError`` for the first stale record after the
        other records were written.
        """

        return self._update_records(
            records,
            raise_on_validation_failure=True,
            raise_on_stale_records=True,
        )

    def current_time(self) -> datetime:
        clock = self.clock or SystemClock(self.config.default_timezone)
        return clock.now()

    def _update_records[TRecord: UpdatableRecord](
        self,
        records: Iterable[TRecord],
        *,
        raise_on_validation_failure: bool,
        raise_on_stale_records: bool,
    ) -> UpdateResult[TRecord]:
        supplied = list(records)
        locking_column = self.schema.locking_column
        lock_ledger: LockLedger = {}

        try:
            changed = select_dirty(supplied)
            if not changed:
                return UpdateResult()
            ensure_unique_keys(changed)

            valid, failed = validate_records(
                changed, raise_on_failure=raise_on_validation_failure
            )
            if not valid:
                log.info("No valid records to update (%d invalid)", len(failed))
                return UpdateResult(failed_records=tuple(failed))

            columns = changed_columns(
                valid,
                primary_key=self.schema.primary_key,
                timestamp_column=self.config.timestamp_column,
                locking_column=locking_column,
            )
            timestamp = self.current_time()
            prepare_locks(valid, lock_ledger, locking_enabled=locking_column is not None)
            sql = sql_for_update_records(
                valid,
                columns,
                timestamp,
                lock_ledger,
                schema=self.schema,
                timestamp_column=self.config.timestamp_column,
            )
            log.debug("Updating %d %s records:\n%s", len(valid), self.schema.table_name, sql)
            updated_ids = perform_update_records_query(sql, self.schema)
        except Exception:
            self._rollback_locks(supplied, lock_ledger)
            raise

        result = build_result(
            valid, failed, updated_ids, locking_enabled=locking_column is not None
        )
        restore_locks(result.stale_records, lock_ledger)

        successful = confirmed_records(valid, result)
        update_timestamp(successful, timestamp, timestamp_column=self.config.timestamp_column)
        mark_changes_applied(successful)

        log.info(
            "Updated %d %s records (%d invalid, %d stale)",
            len(result.updated_ids),
            self.schema.table_name,
            len(result.failed_records),
            len(result.stale_records),
        )
        validate_result(result, raise_on_stale=raise_on_stale_records)
        return result

    @staticmethod
    def _rollback_locks(records: Iterable[UpdatableRecord], lock_ledger: LockLedger) -> None:
        if not lock_ledger:
            return
        for record in records:
            try:
                restore_locks((record,), lock_ledger)
            except Exception:
                # keep the original error and go on with the remaining records
                log.exception(
                    "Failed to restore the lock value of %r after a failed batch", record
                )
