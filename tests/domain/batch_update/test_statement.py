from __future__ import annotations

from datetime import UTC, datetime

import pytest

from batchupdate.domain.batch_update import LockLedger, prepare_locks, sql_for_update_records
from batchupdate.domain.batch_update.statement import (
    all_columns,
    build_sql_template,
    changed_values,
    column_names_sql,
    set_columns_sql,
    type_casts_sql,
    values_sql,
)
from batchupdate.domain.errors import BatchArgumentError
from tests.helpers.records import make_record
from tests.helpers.schema import FakeTableSchema

TIMESTAMP = datetime(2024, 1, 1, tzinfo=UTC)
QUOTED_TIMESTAMP = "'2024-01-01 00:00:00+00:00'"


def test_sql_for_update_records_without_locking(schema: FakeTableSchema) -> None:
    records = [make_record(1, foo=4), make_record(2, bar=3)]

    sql = sql_for_update_records(
        records,
        ("bar", "foo", "updated_at"),
        TIMESTAMP,
        {},
        schema=schema,
        timestamp_column="updated_at",
    )

    assert sql == (
        'UPDATE "records" SET\n'
        '  "bar" = "records_2"."bar", "foo" = "records_2"."foo", '
        '"updated_at" = "records_2"."updated_at"\n'
        "FROM (\n"
        "  VALUES\n"
        "    (NULL::integer, NULL::integer, NULL::integer, "
        "NULL::timestamp without time zone),\n"
        f"    (1, NULL, 4, {QUOTED_TIMESTAMP}), (2, 3, NULL, {QUOTED_TIMESTAMP})\n"
        ")\n"
        'AS "records_2"("id", "bar", "foo", "updated_at")\n'
        'WHERE "records"."id" = "records_2"."id"\n'
        'RETURNING "records"."id"'
    )


def test_sql_for_update_records_with_locking(locking_schema: FakeTableSchema) -> None:
    records = [make_record(1, lock_version=0, foo=4)]
    ledger: LockLedger = {}
    prepare_locks(records, ledger, locking_enabled=True)

    sql = sql_for_update_records(
        records,
        ("foo", "updated_at", "lock_version"),
        TIMESTAMP,
        ledger,
        schema=locking_schema,
        timestamp_column="updated_at",
    )

    assert sql == (
        'UPDATE "records" SET\n'
        '  "foo" = "records_2"."foo", "updated_at" = "records_2"."updated_at", '
        '"lock_version" = "records_2"."lock_version"\n'
        "FROM (\n"
        "  VALUES\n"
        "    (NULL::integer, NULL::integer, NULL::integer, "
        "NULL::timestamp without time zone, NULL::integer),\n"
        f"    (1, 0, 4, {QUOTED_TIMESTAMP}, 1)\n"
        ")\n"
        'AS "records_2"("id", "prev_lock_version", "foo", "updated_at", "lock_version")\n'
        'WHERE "records"."id" = "records_2"."id"\n'
        '  AND "records"."lock_version" = "records_2"."prev_lock_version"\n'
        'RETURNING "records"."id"'
    )


def test_sql_for_update_records_requires_records(schema: FakeTableSchema) -> None:
    with pytest.raises(BatchArgumentError, match="No changed records given"):
        sql_for_update_records(
            [], ("foo", "updated_at"), TIMESTAMP, {}, schema=schema, timestamp_column="updated_at"
        )


def test_sql_for_update_records_requires_changed_columns(schema: FakeTableSchema) -> None:
    with pytest.raises(BatchArgumentError, match="No changed attributes given"):
        sql_for_update_records(
            [make_record(1, foo=1)], (), TIMESTAMP, {}, schema=schema, timestamp_column="updated_at"
        )


def test_all_columns_orders_primary_key_then_previous_lock() -> None:
    assert all_columns("id", ("foo", "bar")) == ["id", "foo", "bar"]
    assert all_columns("id", ("foo", "lock_version"), locking_column="lock_version") == [
        "id",
        "prev_lock_version",
        "foo",
        "lock_version",
    ]


def test_all_columns_requires_primary_key() -> None:
    with pytest.raises(BatchArgumentError, match="No primary key given"):
        all_columns("", ("foo",))


def test_set_columns_sql(schema: FakeTableSchema) -> None:
    assert set_columns_sql(("foo", "bar"), "alias", schema) == (
        '"foo" = alias."foo", "bar" = alias."bar"'
    )


def test_set_columns_sql_requires_columns(schema: FakeTableSchema) -> None:
    with pytest.raises(BatchArgumentError):
        set_columns_sql((), "alias", schema)


def test_column_names_sql(schema: FakeTableSchema) -> None:
    assert column_names_sql(["id", "foo", "bar", "updated_at"], schema) == (
        '"id", "foo", "bar", "updated_at"'
    )
    with pytest.raises(BatchArgumentError, match="No column names given"):
        column_names_sql([], schema)


def test_type_casts_sql(schema: FakeTableSchema) -> None:
    assert type_casts_sql(["id", "name", "flag", "updated_at"], schema) == (
        "(NULL::integer, NULL::character varying(255), NULL::boolean, "
        "NULL::timestamp without time zone)"
    )


def test_type_casts_sql_types_previous_lock_like_lock_column(schema: FakeTableSchema) -> None:
    schema.types["lock_version"] = "bigint"

    casts = type_casts_sql(
        ["id", "prev_lock_version", "foo", "lock_version"],
        schema,
        locking_column="lock_version",
    )

    assert casts == "(NULL::integer, NULL::bigint, NULL::integer, NULL::bigint)"


def test_type_casts_sql_requires_columns(schema: FakeTableSchema) -> None:
    with pytest.raises(BatchArgumentError, match="No column names given"):
        type_casts_sql([], schema)


def test_changed_values_fall_back_to_current_values() -> None:
    first = make_record(1, foo=3)
    second = make_record(2, bar=4)
    second.attributes["foo"] = 9  # persisted value, not a change

    rows = changed_values(
        [first, second],
        ["id", "foo", "bar", "updated_at"],
        timestamp_column="updated_at",
        timestamp=TIMESTAMP,
        lock_ledger={},
    )

    assert rows == [[1, 3, None, TIMESTAMP], [2, 9, 4, TIMESTAMP]]


def test_changed_values_carry_previous_and_new_lock_values() -> None:
    records = [make_record(1, lock_version=1, foo=3), make_record(2, lock_version=2, foo=5)]
    ledger: LockLedger = {}
    prepare_locks(records, ledger, locking_enabled=True)

    rows = changed_values(
        records,
        ["id", "prev_lock_version", "foo", "updated_at", "lock_version"],
        timestamp_column="updated_at",
        timestamp=TIMESTAMP,
        lock_ledger=ledger,
        locking_column="lock_version",
    )

    assert rows == [[1, 1, 3, TIMESTAMP, 2], [2, 2, 5, TIMESTAMP, 3]]


def test_changed_values_compare_missing_lock_value_as_zero() -> None:
    record = make_record(1, lock_version=0, foo=3)
    record.attributes["lock_version"] = None
    ledger: LockLedger = {}
    prepare_locks([record], ledger, locking_enabled=True)

    rows = changed_values(
        [record],
        ["id", "prev_lock_version", "foo", "lock_version"],
        timestamp_column="updated_at",
        timestamp=TIMESTAMP,
        lock_ledger=ledger,
        locking_column="lock_version",
    )

    assert rows == [[1, 0, 3, 1]]
    assert ledger == {1: None}


def test_changed_values_requires_records() -> None:
    with pytest.raises(BatchArgumentError, match="No changed records given"):
        changed_values(
            [], ["id"], timestamp_column="updated_at", timestamp=TIMESTAMP, lock_ledger={}
        )


def test_values_sql_quotes_every_value(schema: FakeTableSchema) -> None:
    rows = [[1, "fo'o", None, True], [2, None, "ba'r", False]]

    assert values_sql(rows, schema) == (
        "(1, 'fo''o', NULL, TRUE), (2, NULL, 'ba''r', FALSE)"
    )


def test_values_sql_requires_rows(schema: FakeTableSchema) -> None:
    with pytest.raises(BatchArgumentError, match="No changed values given"):
        values_sql([], schema)


def test_build_sql_template_adds_locking_condition_only_when_locking() -> None:
    condition = '{table}.{locking_column} = {alias}.{prev_locking_column}'

    assert condition in build_sql_template(locking_enabled=True)
    assert condition not in build_sql_template(locking_enabled=False)
    assert build_sql_template(locking_enabled=False).endswith(
        "RETURNING {table}.{primary_key}"
    )
