"""Split changed records into valid and invalid ones."""

from __future__ import annotations

from typing import TYPE_CHECKING

from batchupdate.domain.errors import RecordInvalidError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from batchupdate.domain.ports import UpdatableRecord


def validate_records[TRecord: UpdatableRecord](
    records: Iterable[TRecord],
    *,
    raise_on_failure: bool = False,
) -> tuple[list[TRecord], list[TRecord]]:
    """Return ``(valid, invalid)`` preserving input order within each group.

    With ``raise_on_failure`` the first invalid record aborts the batch with
    ``RecordInvalidError``.
    """

    valid: list[TRecord] = []
    invalid: list[TRecord] = []
    for record in records:
        (valid if record.is_valid() else invalid).append(record)

    if raise_on_failure and invalid:
        raise RecordInvalidError(invalid[0])
    return valid, invalid
