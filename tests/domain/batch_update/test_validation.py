from __future__ import annotations

import pytest

from batchupdate.domain.batch_update import validate_records
from batchupdate.domain.errors import RecordInvalidError
from tests.helpers.records import make_record


def test_all_valid() -> None:
    records = [make_record(1, foo=1), make_record(2, foo=2)]

    valid, invalid = validate_records(records)

    assert valid == records
    assert invalid == []


def test_none_valid() -> None:
    records = [make_record(1, valid=False), make_record(2, valid=False)]

    valid, invalid = validate_records(records)

    assert valid == []
    assert invalid == records


def test_partition_is_stable() -> None:
    a = make_record(1, valid=False)
    b = make_record(2)
    c = make_record(3, valid=False)
    d = make_record(4)

    valid, invalid = validate_records([a, b, c, d])

    assert valid == [b, d]
    assert invalid == [a, c]


def test_raise_on_failure_names_first_invalid_record() -> None:
    first_invalid = make_record(2, valid=False)
    records = [make_record(1), first_invalid, make_record(3, valid=False)]

    with pytest.raises(RecordInvalidError) as exc:
        validate_records(records, raise_on_failure=True)

    assert exc.value.record is first_invalid


def test_raise_on_failure_passes_when_all_valid() -> None:
    records = [make_record(1), make_record(2)]

    valid, invalid = validate_records(records, raise_on_failure=True)

    assert valid == records
    assert invalid == []
