"""Adapt mapped ORM instances to the ``UpdatableRecord`` port."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.orm.attributes import set_committed_value

from batchupdate.domain.errors import BatchArgumentError

if TYPE_CHECKING:
    from sqlalchemy.orm import InstanceState

type InstanceValidator[TEntity] = Callable[[TEntity], bool]


class OrmRecord[TEntity]:
    """Dirty tracking comes from SQLAlchemy attribute history.

    Lock increments and persist bookkeeping go through ``set_committed_value`` so
    the owning session sees no pending change and will not flush its own UPDATE.
    """

    def __init__(
        self,
        instance: TEntity,
        *,
        validator: InstanceValidator[TEntity] | None = None,
    ) -> None:
        self.instance = instance
        self._state: InstanceState[TEntity] = inspect(instance)
        mapper = self._state.mapper
        self._keys_by_column = {prop.columns[0].name: prop.key for prop in mapper.column_attrs}
        version_column = mapper.version_id_col
        self._lock_key = (
            self._keys_by_column[version_column.name] if version_column is not None else None
        )
        self._validator = validator

    def __repr__(self) -> str:
        return f"OrmRecord({self.instance!r})"

    def primary_key_value(self) -> Hashable:
        identity = self._state.identity
        if identity is None:
            identity = self._state.mapper.primary_key_from_instance(self.instance)
        return identity[0]

    def is_new(self) -> bool:
        return self._state.key is None

    def changed_attribute_names(self) -> set[str]:
        return {
            column
            for column, key in self._keys_by_column.items()
            if self._state.attrs[key].history.has_changes()
        }

    def is_valid(self) -> bool:
        if self._validator is None:
            return True
        return self._validator(self.instance)

    def get_attribute(self, name: str) -> Any:
        return getattr(self.instance, self._key(name))

    def set_attribute(self, name: str, value: object) -> None:
        setattr(self.instance, self._key(name), value)

    def get_lock_value(self) -> int | None:
        if self._lock_key is None:
            return None
        return getattr(self.instance, self._lock_key)

    def set_lock_value(self, value: int | None) -> None:
        if self._lock_key is not None:
            set_committed_value(self.instance, self._lock_key, value)

    def mark_persisted(self) -> None:
        for name in self.changed_attribute_names():
            key = self._key(name)
            set_committed_value(self.instance, key, getattr(self.instance, key))

    def discard_changes(self) -> None:
        """Drop pending changes so the session will not flush them.

        The discarded attributes are expired and load their stored values on next access.
        """

        names = [self._key(name) for name in self.changed_attribute_names()]
        session = self._state.session
        if names and session is not None:
            session.expire(self.instance, names)

    def _key(self, column: str) -> str:
        try:
            return self._keys_by_column[column]
        except KeyError as exc:
            raise BatchArgumentError(
                f"{type(self.instance).__name__} has no mapped column {column!r}"
            ) from exc
