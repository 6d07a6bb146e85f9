"""Errors raised while loading batch update settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Base for settings problems detected before any batch runs."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable is absent or blank."""


class InvalidSettingError(ConfigurationError):
    """A setting holds a value the batch updater cannot work with."""

    def __init__(self, setting: str, value: object, expected: str) -> None:
        super().__init__(f"Unsupported {setting}: {value!r} (expected {expected})")
        self.setting = setting
        self.value = value
