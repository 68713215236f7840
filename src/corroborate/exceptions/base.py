"""Root exception for Corroborate."""

from __future__ import annotations


class CorroborateError(Exception):
    """Base class for all Corroborate errors."""
