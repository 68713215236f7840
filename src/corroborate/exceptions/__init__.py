"""Shared exception hierarchy for Corroborate."""

from __future__ import annotations

from .base import CorroborateError
from .config import ConfigError

__all__ = [
    "ConfigError",
    "CorroborateError",
]
