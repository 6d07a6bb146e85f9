from __future__ import annotations

from .clock import SystemClock
from .logging import configure_logging

__all__ = [
    "SystemClock",
    "configure_logging",
]
