"""Configuration-related exceptions."""

from __future__ import annotations

from corroborate.exceptions.base import CorroborateError


class ConfigError(CorroborateError, ValueError):
    """Raised when analysis configuration is invalid."""
