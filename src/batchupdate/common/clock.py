"""Wall-clock source for the last-modified column."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from batchupdate.config import DefaultTimezone


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Return the current time in either UTC or the local timezone."""

    default_timezone: DefaultTimezone = "utc"

    def now(self) -> datetime:
        if self.default_timezone == "utc":
            return datetime.now(tz=UTC)
        return datetime.now().astimezone()
