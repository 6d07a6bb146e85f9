"""Synthesis of the multi-row ``UPDATE ... FROM (VALUES ...)`` statement.

Example, for two records dirtying different columns of ``records`` without
locking::

    UPDATE "records" SET
      "bar" = "records_2"."bar", "foo" = "records_2"."foo", "updated_at" = "records_2"."updated_at"
    FROM (
      VALUES
        (NULL::integer, NULL::integer, NULL::integer, NULL::timestamp without time zone),
        (1, NULL, 4, '2024-01-01 00:00:00'),
        (2, 3, NULL, '2024-01-01 00:00:00')
    )
    AS "records_2"("id", "bar", "foo", "updated_at")
    WHERE "records"."id" = "records_2"."id"
    RETURNING "records"."id"

The first ``VALUES`` row only carries type casts; literal rows are otherwise
untyped and PostgreSQL would guess (and often miss) booleans, timestamps and
nullable numbers. It never matches a table row since its primary key is NULL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from batchupdate.domain.errors import BatchArgumentError

from .quoting import quote

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from batchupdate.domain.ports import TableSchema, UpdatableRecord

    from .changeset import ColumnSet
    from .locking import LockLedger

UPDATE_RECORDS_SQL_TEMPLATE: Final[str] = """\
UPDATE {table} SET
  {set_columns}
FROM (
  VALUES
    {type_casts},
    {values}
)
AS {alias}({columns})
WHERE {table}.{primary_key} = {alias}.{primary_key}"""

UPDATE_RECORDS_SQL_LOCKING_CONDITION: Final[str] = """
  AND {table}.{locking_column} = {alias}.{prev_locking_column}"""

UPDATE_RECORDS_SQL_FOOTER: Final[str] = """
RETURNING {table}.{primary_key}"""

PREV_LOCKING_PREFIX: Final[str] = "prev_"
TABLE_ALIAS_SUFFIX: Final[str] = "_2"


def prev_locking_column(locking_column: str) -> str:
    return f"{PREV_LOCKING_PREFIX}{locking_column}"


def table_alias(table_name: str) -> str:
    return f"{table_name}{TABLE_ALIAS_SUFFIX}"


def all_columns(
    primary_key: str,
    changed: ColumnSet,
    *,
    locking_column: str | None = None,
) -> list[str]:
    """Return the ``VALUES`` column order: primary key, previous lock, changed columns."""

    if not primary_key:
        raise BatchArgumentError("No primary key given")
    if not changed:
        raise BatchArgumentError("No changed attributes given")
    columns = [primary_key]
    if locking_column is not None:
        columns.append(prev_locking_column(locking_column))
    columns.extend(changed)
    return columns


def set_columns_sql(changed: ColumnSet, alias: str, schema: TableSchema) -> str:
    if not changed:
        raise BatchArgumentError("No changed attributes given")
    quoted = (schema.quote_identifier(name) for name in changed)
    return ", ".join(f"{name} = {alias}.{name}" for name in quoted)


def column_names_sql(columns: Sequence[str], schema: TableSchema) -> str:
    if not columns:
        raise BatchArgumentError("No column names given")
    return ", ".join(schema.quote_identifier(name) for name in columns)


def type_casts_sql(
    columns: Sequence[str],
    schema: TableSchema,
    *,
    locking_column: str | None = None,
) -> str:
    """Return the typed ``NULL`` row heading the ``VALUES`` list."""

    if not columns:
        raise BatchArgumentError("No column names given")
    prev_column = prev_locking_column(locking_column) if locking_column is not None else None
    casts: list[str] = []
    for name in columns:
        # the previous lock value shares the locking column type
        source = locking_column if locking_column is not None and name == prev_column else name
        casts.append(f"NULL::{schema.sql_type_of(source)}")
    return "(" + ", ".join(casts) + ")"


def changed_values(
    records: Sequence[UpdatableRecord],
    columns: Sequence[str],
    *,
    timestamp_column: str,
    timestamp: datetime,
    lock_ledger: LockLedger,
    locking_column: str | None = None,
) -> list[list[object]]:
    """Return one value row per record, aligned with ``columns``.

    Columns a record did not dirty itself still carry its current value, since
    the union of changed columns is written to every row.
    """

    if not records:
        raise BatchArgumentError("No changed records given")
    if not columns:
        raise BatchArgumentError("No column names given")

    prev_column = prev_locking_column(locking_column) if locking_column is not None else None
    rows: list[list[object]] = []
    for record in records:
        row: list[object] = [record.primary_key_value()]
        for name in columns[1:]:
            if name == timestamp_column:
                row.append(timestamp)
            elif name == prev_column:
                # a missing lock value was bumped from 0, so compare against 0
                previous = lock_ledger.get(record.primary_key_value())
                row.append(0 if previous is None else previous)
            elif name == locking_column:
                row.append(record.get_lock_value())
            else:
                row.append(record.get_attribute(name))
        rows.append(row)
    return rows


def values_sql(rows: Sequence[Sequence[object]], schema: TableSchema) -> str:
    if not rows:
        raise BatchArgumentError("No changed values given")
    return ", ".join("(" + ", ".join(quote(value, schema) for value in row) + ")" for row in rows)


def build_sql_template(*, locking_enabled: bool) -> str:
    if locking_enabled:
        return (
            UPDATE_RECORDS_SQL_TEMPLATE
            + UPDATE_RECORDS_SQL_LOCKING_CONDITION
            + UPDATE_RECORDS_SQL_FOOTER
        )
    return UPDATE_RECORDS_SQL_TEMPLATE + UPDATE_RECORDS_SQL_FOOTER


def sql_for_update_records(
    records: Sequence[UpdatableRecord],
    changed: ColumnSet,
    timestamp: datetime,
    lock_ledger: LockLedger,
    *,
    schema: TableSchema,
    timestamp_column: str,
) -> str:
    """Build the statement updating ``records`` in a single round trip.

    ``records`` must already be filtered down to valid, dirty records and
    ``changed`` must be non-empty; lock values must already be incremented.
    """

    if not records:
        raise BatchArgumentError("No changed records given")

    locking_column = schema.locking_column
    columns = all_columns(schema.primary_key, changed, locking_column=locking_column)
    alias = schema.quote_identifier(table_alias(schema.table_name))
    rows = changed_values(
        records,
        columns,
        timestamp_column=timestamp_column,
        timestamp=timestamp,
        lock_ledger=lock_ledger,
        locking_column=locking_column,
    )

    options = {
        "table": schema.quote_identifier(schema.table_name),
        "set_columns": set_columns_sql(changed, alias, schema),
        "type_casts": type_casts_sql(columns, schema, locking_column=locking_column),
        "values": values_sql(rows, schema),
        "alias": alias,
        "columns": column_names_sql(columns, schema),
        "primary_key": schema.quote_identifier(schema.primary_key),
    }
    if locking_column is not None:
        options["locking_column"] = schema.quote_identifier(locking_column)
        options["prev_locking_column"] = schema.quote_identifier(
            prev_locking_column(locking_column)
        )

    return build_sql_template(locking_enabled=locking_column is not None).format(**options)
