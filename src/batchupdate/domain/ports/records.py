"""Entity contract consumed by the batch update engine."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol, runtime_checkable


@runtime_checkable
class UpdatableRecord(Protocol):
    """An in-memory record with dirty tracking, validation and an optional lock value.

    ``get_lock_value``/``set_lock_value`` are only called when the table schema
    reports a locking column.
    """

    def primary_key_value(self) -> Hashable: ...

    def is_new(self) -> bool: ...

    def changed_attribute_names(self) -> set[str]: ...

    def is_valid(self) -> bool: ...

    def get_attribute(self, name: str) -> object: ...

    def set_attribute(self, name: str, value: object) -> None: ...

    def get_lock_value(self) -> int | None: ...

    def set_lock_value(self, value: int | None) -> None: ...

    def mark_persisted(self) -> None: ...
