"""Batch update engine configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal, cast

from .env import optional_env_var
from .errors import InvalidSettingError

type DefaultTimezone = Literal["utc", "local"]

DEFAULT_TIMESTAMP_COLUMN: Final[str] = "updated_at"
DEFAULT_TIMEZONE: Final[DefaultTimezone] = "utc"
_TIMEZONES: Final[frozenset[str]] = frozenset({"utc", "local"})


@dataclass(frozen=True, slots=True)
class BatchUpdateConfig:
    """Settings shared by every batch update invocation."""

    timestamp_column: str = DEFAULT_TIMESTAMP_COLUMN
    default_timezone: DefaultTimezone = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        if not self.timestamp_column.strip():
            raise InvalidSettingError("timestamp column", self.timestamp_column, "a column name")
        if self.default_timezone not in _TIMEZONES:
            raise InvalidSettingError("default timezone", self.default_timezone, "utc or local")


def get_batch_update_config() -> BatchUpdateConfig:
    timestamp_column = optional_env_var("BATCHUPDATE_TIMESTAMP_COLUMN", DEFAULT_TIMESTAMP_COLUMN)
    timezone = optional_env_var("BATCHUPDATE_DEFAULT_TIMEZONE", DEFAULT_TIMEZONE).lower()
    return BatchUpdateConfig(
        timestamp_column=timestamp_column,
        default_timezone=cast("DefaultTimezone", timezone),
    )
