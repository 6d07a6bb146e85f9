"""Schema and connection contract for the table being updated."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

type ResultRow = Mapping[str, object]


@runtime_checkable
class TableSchema(Protocol):
    """Table metadata, dialect quoting and statement execution for one table."""

    @property
    def table_name(self) -> str: ...

    @property
    def primary_key(self) -> str: ...

    @property
    def locking_column(self) -> str | None:
        """Name of the optimistic locking column, or ``None`` when locking is off."""
        ...

    def sql_type_of(self, column: str) -> str: ...

    def quote_identifier(self, name: str) -> str: ...

    def quote_value(self, value: object) -> str: ...

    def execute(self, sql: str) -> Sequence[ResultRow]:
        """Run ``sql`` and return its rows keyed by column name (values uncast)."""
        ...
