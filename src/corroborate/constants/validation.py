"""Stable validation error codes and allowed-key sets for config validation."""

from __future__ import annotations

CFG001: str = "CFG001"  # config file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # invalid enum value
CFG007: str = "CFG007"  # value out of range
CFG008: str = "CFG008"  # contradictory ignore config
CFG009: str = "CFG009"  # invalid nested mapping

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "tool_weights",
        "correlation_bonuses",
        "min_confidence_threshold",
        "fuzzy_line_matching",
        "enable_correlation",
        "enable_deduplication",
        "max_findings_per_file",
        "severity_threshold",
        "group_related_findings",
        "display_line_proximity",
        "parallel_analysis",
        "ignore",
        "severity_overrides",
        "adaptive",
    }
)

BOOLEAN_KEYS: tuple[str, ...] = (
    "enable_correlation",
    "enable_deduplication",
    "group_related_findings",
    "parallel_analysis",
)

# Keys holding a probability-like value in [0, 1].
UNIT_INTERVAL_KEYS: tuple[str, ...] = ("min_confidence_threshold",)

NON_NEGATIVE_INT_KEYS: tuple[str, ...] = ("fuzzy_line_matching", "display_line_proximity")
POSITIVE_INT_KEYS: tuple[str, ...] = ("max_findings_per_file",)
