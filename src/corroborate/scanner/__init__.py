"""Analysis orchestration package."""

from __future__ import annotations

from typing import Any

__all__ = ["AnalysisContext", "analyze_changeset", "analyze_file", "analyze_findings"]


def __getattr__(name: str) -> Any:
    """Lazily expose orchestrator APIs to avoid import cycles at package import time."""
    if name in __all__:
        from . import orchestrator

        return getattr(orchestrator, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
