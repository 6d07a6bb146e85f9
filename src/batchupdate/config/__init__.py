"""Application configuration helpers."""

from __future__ import annotations

from .batch_update import (
    DEFAULT_TIMESTAMP_COLUMN,
    BatchUpdateConfig,
    DefaultTimezone,
    get_batch_update_config,
)
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, InvalidSettingError, MissingConfigurationError
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "DEFAULT_TIMESTAMP_COLUMN",
    "BatchUpdateConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DefaultTimezone",
    "InvalidSettingError",
    "MissingConfigurationError",
    "get_batch_update_config",
    "get_database_config",
    "optional_env_var",
    "require_env_vars",
]
