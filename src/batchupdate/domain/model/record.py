"""
Plain in-memory record:
explicit attribute values, explicit dirty flags, pluggable validators.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

type Validator = Callable[[TrackedRecord], bool]


@dataclass(eq=False, kw_only=True)
class TrackedRecord:
    """Record implementing ``UpdatableRecord`` without any ORM.

    ``attributes`` holds the persisted values at construction time; changes made
    through ``set_attribute`` are flagged until ``mark_persisted`` is called.
    """

    attributes: dict[str, Any] = field(default_factory=dict)
    primary_key: str = "id"
    locking_column: str | None = None
    new: bool = False
    validators: tuple[Validator, ...] = ()
    _changed: set[str] = field(default_factory=set, init=False, repr=False)

    def primary_key_value(self) -> Hashable:
        return self.attributes.get(self.primary_key)

    def is_new(self) -> bool:
        return self.new

    def changed_attribute_names(self) -> set[str]:
        return set(self._changed)

    def is_valid(self) -> bool:
        return all(validator(self) for validator in self.validators)

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: object) -> None:
        if name in self.attributes and self.attributes[name] == value:
            return
        self.attributes[name] = value
        self._changed.add(name)

    def get_lock_value(self) -> int | None:
        if self.locking_column is None:
            return None
        return self.attributes.get(self.locking_column)

    def set_lock_value(self, value: int | None) -> None:
        # lock bookkeeping is not a user change
        if self.locking_column is not None:
            self.attributes[self.locking_column] = value

    def mark_persisted(self) -> None:
        self.new = False
        self._changed.clear()

    def __getitem__(self, name: str) -> Any:
        return self.get_attribute(name)

    def __setitem__(self, name: str, value: object) -> None:
        self.set_attribute(name, value)
