"""Repository running batch updates for one mapped class."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from batchupdate.config import get_batch_update_config
from batchupdate.domain.batch_update import BatchUpdater
from batchupdate.domain.errors import StaleRecordError
from batchupdate.domain.model import UpdateResult

from .gateway import SqlAlchemyTableGateway
from .records import InstanceValidator, OrmRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from batchupdate.config import BatchUpdateConfig
    from batchupdate.domain.ports import Clock


log = getLogger(__name__)


class SqlAlchemyBatchUpdateRepository[TEntity]:
    """Update changed instances of ``entity_cls`` with one statement per call.

    Results carry the ORM instances themselves. Errors raised in strict mode carry
    the ``OrmRecord`` wrapper; its ``instance`` attribute is the ORM instance.

    Instances the batch rejected (invalid or stale) have their pending changes
    discarded, so committing the session afterwards writes nothing for them.
    ``RecordInvalidError`` in strict mode is raised before anything is written and
    leaves every instance untouched; roll back or fix them before committing.
    """

    def __init__(
        self,
        session: Session,
        entity_cls: type[TEntity],
        *,
        validator: InstanceValidator[TEntity] | None = None,
        clock: Clock | None = None,
        config: BatchUpdateConfig | None = None,
    ) -> None:
        self.session = session
        self._entity_cls = entity_cls
        self._validator = validator
        self._updater = BatchUpdater(
            schema=SqlAlchemyTableGateway.for_entity(session, entity_cls),
            config=config or get_batch_update_config(),
            clock=clock,
        )

    def update_records(self, instances: Iterable[TEntity]) -> UpdateResult[TEntity]:
        result = self._updater.update_records(self._wrap(instances))
        self._discard_rejected([*result.failed_records, *result.stale_records])
        return self._unwrap(result)

    def update_records_strict(self, instances: Iterable[TEntity]) -> UpdateResult[TEntity]:
        records = self._wrap(instances)
        try:
            result = self._updater.update_records_strict(records)
        except StaleRecordError:
            # confirmed records are already marked persisted, so the dirty ones are stale
            self._discard_rejected(
                [
                    record
                    for record in records
                    if not record.is_new() and record.changed_attribute_names()
                ]
            )
            raise
        return self._unwrap(result)

    @staticmethod
    def _discard_rejected(records: Iterable[OrmRecord[TEntity]]) -> None:
        for record in records:
            record.discard_changes()
            log.debug("Discarded pending changes of rejected %r", record.instance)

    def _wrap(self, instances: Iterable[TEntity]) -> list[OrmRecord[TEntity]]:
        return [OrmRecord(instance, validator=self._validator) for instance in instances]

    @staticmethod
    def _unwrap(result: UpdateResult[OrmRecord[TEntity]]) -> UpdateResult[TEntity]:
        return UpdateResult(
            updated_ids=result.updated_ids,
            failed_records=tuple(record.instance for record in result.failed_records),
            stale_records=tuple(record.instance for record in result.stale_records),
        )
