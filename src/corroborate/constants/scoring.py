"""Constants for severity ranking, risk scoring and recommendations."""

from __future__ import annotations

SEVERITY_ORDER: tuple[str, ...] = ("critical", "high", "medium", "low", "info")

# Higher rank is more severe; used by threshold filters.
SEVERITY_RANK: dict[str, int] = {"critical": 4, "high": 3, "medium": 2, "low": 1, "info": 0}

SEVERITY_WEIGHTS: dict[str, float] = {
    "critical": 1.0,
    "high": 0.8,
    "medium": 0.5,
    "low": 0.3,
    "info": 0.1,
}

MAX_RISK_POINTS: int = 100
RISK_POINTS_SCALE: int = 10
CORROBORATED_RISK_MULTIPLIER: float = 1.2

LOW_RISK_MIN_SCORE: int = 80
MEDIUM_RISK_MIN_SCORE: int = 60
HIGH_RISK_MIN_SCORE: int = 40

RISK_DESCRIPTIONS: dict[str, str] = {
    "none": "No issues detected",
    "low": "Code quality is good with minor issues",
    "medium": "Some issues require attention",
    "high": "Significant issues detected - review recommended",
    "critical": "Critical security or quality issues - immediate attention required",
}

MANY_HIGH_FINDINGS: int = 3
MANY_MEDIUM_FINDINGS: int = 5

# Lower rank is more severe when merging verdicts from independent sources.
ACTION_SEVERITY_RANK: dict[str, int] = {"block": 0, "caution": 1, "review": 2, "approve": 3}
