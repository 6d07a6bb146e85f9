"""``TableSchema`` implementation over a SQLAlchemy session or connection."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import Table, inspect, literal, text
from sqlalchemy.orm import Session

from batchupdate.domain.errors import BatchArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Column
    from sqlalchemy.engine import Connection, Dialect

    from batchupdate.domain.ports import ResultRow


class SqlAlchemyTableGateway:
    """Expose one table's metadata, the bind's dialect quoting and raw execution."""

    def __init__(
        self,
        bind: Session | Connection,
        table: Table,
        *,
        locking_column: str | None = None,
    ) -> None:
        primary_columns = list(table.primary_key.columns)
        if len(primary_columns) != 1:
            raise BatchArgumentError(
                f"Table {table.name!r} needs a single-column primary key for batch updates"
            )
        if locking_column is not None and locking_column not in table.c:
            raise BatchArgumentError(
                f"Locking column {locking_column!r} not found in table {table.name!r}"
            )
        self.bind = bind
        self.table = table
        self._primary_column: Column[object] = primary_columns[0]
        self._locking_column = locking_column

    @classmethod
    def for_entity(cls, session: Session, entity_cls: type[object]) -> SqlAlchemyTableGateway:
        """Build a gateway from a mapped class; its ``version_id_col`` enables locking."""

        mapper = inspect(entity_cls)
        version_column = mapper.version_id_col
        return cls(
            session,
            cast("Table", mapper.local_table),
            locking_column=version_column.name if version_column is not None else None,
        )

    @property
    def dialect(self) -> Dialect:
        if isinstance(self.bind, Session):
            return self.bind.get_bind().dialect
        return self.bind.dialect

    @property
    def table_name(self) -> str:
        return self.table.name

    @property
    def primary_key(self) -> str:
        return self._primary_column.name

    @property
    def locking_column(self) -> str | None:
        return self._locking_column

    def sql_type_of(self, column: str) -> str:
        try:
            column_type = self.table.c[column].type
        except KeyError as exc:
            raise BatchArgumentError(
                f"Column {column!r} not found in table {self.table.name!r}"
            ) from exc
        return column_type.compile(dialect=self.dialect)

    def quote_identifier(self, name: str) -> str:
        return self.dialect.identifier_preparer.quote_identifier(name)

    def quote_value(self, value: object) -> str:
        compiled = literal(value).compile(
            dialect=self.dialect,
            compile_kwargs={"literal_binds": True},
        )
        return str(compiled)

    def execute(self, sql: str) -> Sequence[ResultRow]:
        """Run ``sql`` without flushing the session first.

        Pending ORM changes of the batched instances are written by ``sql`` itself; a
        flush would issue a second UPDATE per instance and trip the version check.
        """

        if isinstance(self.bind, Session):
            with self.bind.no_autoflush:
                return self.bind.execute(text(sql)).mappings().all()
        return self.bind.execute(text(sql)).mappings().all()
