"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "corroborate.yaml"

DEFAULT_SEVERITY_THRESHOLD: str = "all"
VALID_SEVERITY_THRESHOLDS: frozenset[str] = frozenset({"all", "critical", "high", "medium", "low", "info"})
VALID_SEVERITIES: frozenset[str] = frozenset({"critical", "high", "medium", "low", "info"})

DEFAULT_MAX_FINDINGS_PER_FILE: int = 50
DEFAULT_DISPLAY_LINE_PROXIMITY: int = 10

DEFAULT_DISMISSAL_THRESHOLD: int = 3
DEFAULT_CONFIDENCE_REDUCTION: float = 0.2
DEFAULT_ACTION_MAX_AGE_DAYS: int = 90
MAX_ADAPTIVE_STEPS: int = 3
MIN_ADAPTIVE_CONFIDENCE: float = 0.1

CORRELATION_BONUS_KEYS: frozenset[str] = frozenset({"two_tools", "three_tools", "llm_corroboration"})
IGNORE_KEYS: frozenset[str] = frozenset({"files", "rules"})
ADAPTIVE_KEYS: frozenset[str] = frozenset({"dismissal_threshold", "confidence_reduction", "max_age_days"})
