"""Literal quoting and SQL type helpers for the synthesized statement."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Final
from uuid import UUID

if TYPE_CHECKING:
    from batchupdate.domain.ports import TableSchema

_INTEGER_TYPES: Final[frozenset[str]] = frozenset(
    {"smallint", "integer", "bigint", "int", "int2", "int4", "int8", "serial", "bigserial"}
)
_DECIMAL_TYPES: Final[frozenset[str]] = frozenset({"numeric", "decimal"})
_TEXT_TYPES: Final[frozenset[str]] = frozenset(
    {"text", "varchar", "character varying", "character", "char"}
)


def quote(value: object, schema: TableSchema) -> str:
    """Render ``value`` as a SQL literal.

    Booleans are emitted as bare ``TRUE``/``FALSE``: generic adapters tend to quote
    them as strings, which PostgreSQL will not coerce inside a ``VALUES`` list.
    Everything else is delegated to the schema's quoting function.
    """

    if value is True:
        return "TRUE"
    if value is False:
        return "FALSE"
    return schema.quote_value(value)


def base_type_name(sql_type: str) -> str:
    """Return ``sql_type`` lower-cased and without its length/precision modifier."""

    return sql_type.split("(", 1)[0].strip().lower()


def typecast(sql_type: str, value: object) -> object:
    """Convert a raw value returned by the driver to the column's Python type."""

    if value is None:
        return None
    base = base_type_name(sql_type)
    if base in _INTEGER_TYPES:
        return int(value)  # type: ignore[call-overload]
    if base == "uuid":
        return value if isinstance(value, UUID) else UUID(str(value))
    if base in _DECIMAL_TYPES:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    if base in _TEXT_TYPES:
        return str(value)
    return value
