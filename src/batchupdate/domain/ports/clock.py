"""Clock port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


@runtime_checkable
class Clock(Protocol):
    """Source of the timestamp written to the last-modified column."""

    def now(self) -> datetime: ...
