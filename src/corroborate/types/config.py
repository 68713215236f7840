"""Typed configuration structures nested inside ``CorroborateConfig``."""

from __future__ import annotations

from dataclasses import dataclass

from corroborate.constants.aggregation import (
    DEFAULT_LLM_CORROBORATION_BONUS,
    DEFAULT_THREE_TOOL_BONUS,
    DEFAULT_TWO_TOOL_BONUS,
)
from corroborate.constants.config import (
    DEFAULT_ACTION_MAX_AGE_DAYS,
    DEFAULT_CONFIDENCE_REDUCTION,
    DEFAULT_DISMISSAL_THRESHOLD,
)


@dataclass(frozen=True)
class CorrelationBonuses:
    """Confidence bonuses for multi-tool agreement."""

    two_tools: float = DEFAULT_TWO_TOOL_BONUS
    three_tools: float = DEFAULT_THREE_TOOL_BONUS
    llm_corroboration: float = DEFAULT_LLM_CORROBORATION_BONUS


@dataclass(frozen=True)
class IgnoreConfig:
    """Paths (globs) and rule IDs whose findings are dropped."""

    files: tuple[str, ...] = ()
    rules: tuple[str, ...] = ()


@dataclass(frozen=True)
class AdaptiveConfig:
    """Settings for dismissal-driven confidence reduction."""

    dismissal_threshold: int = DEFAULT_DISMISSAL_THRESHOLD
    confidence_reduction: float = DEFAULT_CONFIDENCE_REDUCTION
    max_age_days: int = DEFAULT_ACTION_MAX_AGE_DAYS
