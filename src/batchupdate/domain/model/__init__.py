"""Domain model for batch updates."""

from __future__ import annotations

from .record import TrackedRecord, Validator
from .result import UpdateResult

__all__ = [
    "TrackedRecord",
    "UpdateResult",
    "Validator",
]
