"""Detector names and per-tool aggregation tables."""

from __future__ import annotations

TOOL_ESLINT: str = "eslint"
TOOL_SEMGREP: str = "semgrep"
TOOL_DEPENDENCY: str = "dependency"
TOOL_EOL: str = "eol"
TOOL_LLM: str = "llm"

KNOWN_TOOLS: tuple[str, ...] = (
    TOOL_ESLINT,
    TOOL_SEMGREP,
    TOOL_DEPENDENCY,
    TOOL_EOL,
    TOOL_LLM,
)

DEFAULT_TOOL_WEIGHTS: dict[str, float] = {
    TOOL_ESLINT: 0.22,
    TOOL_SEMGREP: 0.28,
    TOOL_DEPENDENCY: 0.18,
    TOOL_EOL: 0.12,
    TOOL_LLM: 0.20,
}
DEFAULT_TOOL_WEIGHT: float = 0.25

# Lower sorts first when choosing the representative finding of a group.
TOOL_PRIORITY: dict[str, int] = {
    TOOL_SEMGREP: 0,
    TOOL_ESLINT: 1,
    TOOL_DEPENDENCY: 2,
    TOOL_EOL: 3,
    TOOL_LLM: 4,
}
UNKNOWN_TOOL_PRIORITY: int = len(TOOL_PRIORITY)
