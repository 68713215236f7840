"""Config data model for Corroborate analyses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from corroborate.constants.aggregation import DEFAULT_FUZZY_LINE_MATCHING, DEFAULT_MIN_CONFIDENCE_THRESHOLD
from corroborate.constants.config import (
    DEFAULT_DISPLAY_LINE_PROXIMITY,
    DEFAULT_MAX_FINDINGS_PER_FILE,
    DEFAULT_SEVERITY_THRESHOLD,
)
from corroborate.constants.tools import DEFAULT_TOOL_WEIGHT, DEFAULT_TOOL_WEIGHTS
from corroborate.types import Severity, SeverityThreshold
from corroborate.types.config import AdaptiveConfig, CorrelationBonuses, IgnoreConfig


def _default_tool_weights() -> Mapping[str, float]:
    return MappingProxyType(dict(DEFAULT_TOOL_WEIGHTS))


def freeze_weights(weights: Mapping[str, float]) -> Mapping[str, float]:
    """Return a read-only copy of a tool weight mapping."""
    return MappingProxyType(dict(weights))


@dataclass(frozen=True)
class AggregationConfig:
    """Settings consumed by the grouper and the confidence aggregator."""

    tool_weights: Mapping[str, float] = field(default_factory=_default_tool_weights)
    correlation_bonuses: CorrelationBonuses = CorrelationBonuses()
    min_confidence_threshold: float = DEFAULT_MIN_CONFIDENCE_THRESHOLD
    fuzzy_line_matching: int = DEFAULT_FUZZY_LINE_MATCHING
    enable_correlation: bool = True
    enable_deduplication: bool = True

    def tool_weight(self, tool: str) -> float:
        """Weight for ``tool``; unknown tools get ``DEFAULT_TOOL_WEIGHT``."""
        return self.tool_weights.get(tool, DEFAULT_TOOL_WEIGHT)


@dataclass(frozen=True)
class CorroborateConfig:
    """Resolved analysis config."""

    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    severity_threshold: SeverityThreshold = DEFAULT_SEVERITY_THRESHOLD  # type: ignore[assignment]
    max_findings_per_file: int = DEFAULT_MAX_FINDINGS_PER_FILE
    group_related_findings: bool = True
    display_line_proximity: int = DEFAULT_DISPLAY_LINE_PROXIMITY
    parallel_analysis: bool = True
    ignore: IgnoreConfig = IgnoreConfig()
    severity_overrides: Mapping[str, Severity] = field(default_factory=lambda: MappingProxyType({}))
    adaptive: AdaptiveConfig = AdaptiveConfig()

    @property
    def has_custom_rules(self) -> bool:
        """Whether ignore patterns or severity overrides are configured."""
        return bool(self.ignore.files or self.ignore.rules or self.severity_overrides)


def default_aggregation_config() -> AggregationConfig:
    """Return the default aggregation settings."""
    return AggregationConfig()


def default_config() -> CorroborateConfig:
    """Return the default analysis settings."""
    return CorroborateConfig()
