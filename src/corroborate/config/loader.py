"""Config loading and normalization for Corroborate analyses."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

from corroborate.config.model import AggregationConfig, CorroborateConfig, freeze_weights
from corroborate.constants.config import CONFIG_FILENAME, VALID_SEVERITIES, VALID_SEVERITY_THRESHOLDS
from corroborate.constants.tools import DEFAULT_TOOL_WEIGHTS
from corroborate.exceptions import ConfigError
from corroborate.types import Severity, SeverityThreshold
from corroborate.types.config import AdaptiveConfig, CorrelationBonuses, IgnoreConfig

logger = logging.getLogger(__name__)


def load_config(root: Path, config_path: Path | None = None) -> CorroborateConfig:
    """Load and validate config from ``corroborate.yaml`` or an explicit path.

    Missing keys keep their defaults; ``tool_weights`` and
    ``correlation_bonuses`` merge key-by-key onto the defaults.
    """
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return CorroborateConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    logger.debug("Loaded config from %s", path)
    return config_from_mapping(raw)


def config_from_mapping(raw: dict[str, Any]) -> CorroborateConfig:
    """Build a ``CorroborateConfig`` from an already-parsed mapping."""
    aggregation = AggregationConfig(
        tool_weights=_build_tool_weights(_ensure_mapping(raw.get("tool_weights"), "tool_weights")),
        correlation_bonuses=_build_bonuses(_ensure_mapping(raw.get("correlation_bonuses"), "correlation_bonuses")),
        min_confidence_threshold=_ensure_unit_float(
            raw.get("min_confidence_threshold", AggregationConfig.min_confidence_threshold),
            "min_confidence_threshold",
        ),
        fuzzy_line_matching=_ensure_int(
            raw.get("fuzzy_line_matching", AggregationConfig.fuzzy_line_matching),
            "fuzzy_line_matching",
            minimum=0,
        ),
        enable_correlation=_ensure_bool(raw.get("enable_correlation", True), "enable_correlation"),
        enable_deduplication=_ensure_bool(raw.get("enable_deduplication", True), "enable_deduplication"),
    )

    severity_threshold = raw.get("severity_threshold", CorroborateConfig.severity_threshold)
    if not isinstance(severity_threshold, str) or severity_threshold.lower() not in VALID_SEVERITY_THRESHOLDS:
        raise ConfigError(
            f"severity_threshold must be one of {sorted(VALID_SEVERITY_THRESHOLDS)}, got {severity_threshold!r}"
        )

    ignore_raw = _ensure_mapping(raw.get("ignore"), "ignore")
    adaptive_raw = _ensure_mapping(raw.get("adaptive"), "adaptive")

    return CorroborateConfig(
        aggregation=aggregation,
        severity_threshold=cast(SeverityThreshold, severity_threshold.lower()),
        max_findings_per_file=_ensure_int(
            raw.get("max_findings_per_file", CorroborateConfig.max_findings_per_file),
            "max_findings_per_file",
            minimum=1,
        ),
        group_related_findings=_ensure_bool(raw.get("group_related_findings", True), "group_related_findings"),
        display_line_proximity=_ensure_int(
            raw.get("display_line_proximity", CorroborateConfig.display_line_proximity),
            "display_line_proximity",
            minimum=0,
        ),
        parallel_analysis=_ensure_bool(raw.get("parallel_analysis", True), "parallel_analysis"),
        ignore=IgnoreConfig(
            files=tuple(_ensure_string_list(ignore_raw.get("files", []), "ignore.files")),
            rules=tuple(_ensure_string_list(ignore_raw.get("rules", []), "ignore.rules")),
        ),
        severity_overrides=_build_severity_overrides(
            _ensure_mapping(raw.get("severity_overrides"), "severity_overrides")
        ),
        adaptive=AdaptiveConfig(
            dismissal_threshold=_ensure_int(
                adaptive_raw.get("dismissal_threshold", AdaptiveConfig.dismissal_threshold),
                "adaptive.dismissal_threshold",
                minimum=1,
            ),
            confidence_reduction=_ensure_unit_float(
                adaptive_raw.get("confidence_reduction", AdaptiveConfig.confidence_reduction),
                "adaptive.confidence_reduction",
            ),
            max_age_days=_ensure_int(
                adaptive_raw.get("max_age_days", AdaptiveConfig.max_age_days),
                "adaptive.max_age_days",
                minimum=1,
            ),
        ),
    )


def _ensure_mapping(value: Any, key_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key_name} must be a mapping")
    return value


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return [item for item in value if item.strip()]


def _ensure_bool(value: Any, key_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key_name} must be a boolean")
    return value


def _ensure_int(value: Any, key_name: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigError(f"{key_name} must be an integer >= {minimum}")
    return value


def _ensure_number(value: Any, key_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"{key_name} must be a non-negative number")
    return float(value)


def _ensure_unit_float(value: Any, key_name: str) -> float:
    number = _ensure_number(value, key_name)
    if number > 1:
        raise ConfigError(f"{key_name} must be between 0 and 1")
    return number


def _build_tool_weights(raw: dict[str, Any]) -> Mapping[str, float]:
    weights = dict(DEFAULT_TOOL_WEIGHTS)
    for tool, weight in raw.items():
        weights[str(tool)] = _ensure_number(weight, f"tool_weights.{tool}")
    return freeze_weights(weights)


def _build_bonuses(raw: dict[str, Any]) -> CorrelationBonuses:
    defaults = CorrelationBonuses()
    return CorrelationBonuses(
        two_tools=_ensure_number(raw.get("two_tools", defaults.two_tools), "correlation_bonuses.two_tools"),
        three_tools=_ensure_number(raw.get("three_tools", defaults.three_tools), "correlation_bonuses.three_tools"),
        llm_corroboration=_ensure_number(
            raw.get("llm_corroboration", defaults.llm_corroboration),
            "correlation_bonuses.llm_corroboration",
        ),
    )


def _build_severity_overrides(raw: dict[str, Any]) -> Mapping[str, Severity]:
    overrides: dict[str, Severity] = {}
    for rule_id, severity in raw.items():
        if not isinstance(severity, str) or severity.lower() not in VALID_SEVERITIES:
            raise ConfigError(
                f"severity_overrides.{rule_id} must be one of {sorted(VALID_SEVERITIES)}, got {severity!r}"
            )
        overrides[str(rule_id)] = cast(Severity, severity.lower())
    return MappingProxyType(overrides)
