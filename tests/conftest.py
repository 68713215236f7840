"""Shared pytest fixtures and builders for findings."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from corroborate.model import AggregatedFinding, Finding

SCHEMAS_DIR: Path = Path(__file__).resolve().parents[1] / "schemas"


def build_finding(**overrides: Any) -> Finding:
    """Finding with neutral defaults; override any field by keyword."""
    values: dict[str, Any] = {
        "tool": "semgrep",
        "rule_id": "generic-rule",
        "severity": "medium",
        "category": "quality",
        "message": "Something looks off",
        "file_path": "src/app.js",
        "line": 10,
        "confidence": 0.7,
    }
    values.update(overrides)
    return Finding(**values)


def build_aggregated(
    *,
    confidence: float = 0.7,
    tools: tuple[str, ...] | None = None,
    **finding_overrides: Any,
) -> AggregatedFinding:
    """Single-group aggregate around ``build_finding(**finding_overrides)``."""
    finding = build_finding(confidence=confidence, **finding_overrides)
    detected = tools or (finding.tool,)
    return AggregatedFinding(
        finding=finding,
        confidence=confidence,
        base_confidence=confidence,
        correlation_bonus=0.0,
        tools_detected=detected,
        num_tools_agreeing=len(detected),
    )


@pytest.fixture()
def make_finding() -> Callable[..., Finding]:
    return build_finding


@pytest.fixture()
def make_aggregated() -> Callable[..., AggregatedFinding]:
    return build_aggregated


@pytest.fixture(scope="session")
def schemas_dir() -> Path:
    """Return the directory holding the shipped JSON Schemas."""
    return SCHEMAS_DIR
