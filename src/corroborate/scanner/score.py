"""Risk scoring over aggregated findings."""

from __future__ import annotations

import math
from collections.abc import Sequence

from corroborate.constants.scoring import (
    CORROBORATED_RISK_MULTIPLIER,
    HIGH_RISK_MIN_SCORE,
    LOW_RISK_MIN_SCORE,
    MAX_RISK_POINTS,
    MEDIUM_RISK_MIN_SCORE,
    RISK_DESCRIPTIONS,
    RISK_POINTS_SCALE,
    SEVERITY_WEIGHTS,
)
from corroborate.model import AggregatedFinding, RiskScore
from corroborate.types import RiskLevel


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def risk_level_from_score(score: int) -> RiskLevel:
    """Map a 0-100 score (100 is clean) to a risk level."""
    if score >= LOW_RISK_MIN_SCORE:
        return "low"
    if score >= MEDIUM_RISK_MIN_SCORE:
        return "medium"
    if score >= HIGH_RISK_MIN_SCORE:
        return "high"
    return "critical"


def risk_points(findings: Sequence[AggregatedFinding]) -> float:
    """Uncapped severity- and confidence-weighted risk load."""
    points = 0.0
    for finding in findings:
        multiplier = CORROBORATED_RISK_MULTIPLIER if finding.is_corroborated else 1.0
        points += SEVERITY_WEIGHTS[finding.severity] * finding.confidence * multiplier * RISK_POINTS_SCALE
    return points


def score_risk(findings: Sequence[AggregatedFinding]) -> RiskScore:
    """Reduce aggregated findings to a single risk score.

    Risk points are capped before being subtracted from the maximum, so the
    score saturates at 0 instead of going negative.
    """
    if not findings:
        return RiskScore(score=MAX_RISK_POINTS, level="low", description=RISK_DESCRIPTIONS["none"], risk_points=0)

    points = min(risk_points(findings), MAX_RISK_POINTS)
    score = max(0, _round_half_up(MAX_RISK_POINTS - points))
    level = risk_level_from_score(score)
    return RiskScore(
        score=score,
        level=level,
        description=RISK_DESCRIPTIONS[level],
        risk_points=_round_half_up(points),
    )
