"""Merge recommendation decision tree."""

from __future__ import annotations

from corroborate.constants.scoring import ACTION_SEVERITY_RANK, MANY_HIGH_FINDINGS, MANY_MEDIUM_FINDINGS
from corroborate.model import Recommendation, RiskScore, Summary


def recommend(summary: Summary | None, risk_score: RiskScore | None) -> Recommendation:
    """Derive the merge verdict from severity counts and the risk level.

    Branches are checked in order and the first match wins.
    """
    if summary is None:
        return Recommendation(
            action="review",
            verdict="Unable to analyze",
            reason="Analysis did not complete successfully",
        )

    critical = summary.by_severity.get("critical", 0)
    high = summary.by_severity.get("high", 0)
    medium = summary.by_severity.get("medium", 0)

    if critical > 0:
        return Recommendation(
            action="block",
            verdict="Changes Requested",
            reason=f"{critical} critical issue(s) must be addressed before merging",
            priority=("Fix critical security vulnerabilities", "Review all flagged code paths"),
        )

    if high > MANY_HIGH_FINDINGS:
        return Recommendation(
            action="review",
            verdict="Needs Review",
            reason=f"{high} high-severity issues detected",
            priority=("Review high-severity findings", "Consider security implications"),
        )

    if high > 0 or medium > MANY_MEDIUM_FINDINGS:
        return Recommendation(
            action="caution",
            verdict="Approve with Caution",
            reason=f"{high} high and {medium} medium issues found",
            priority=("Address high-severity issues", "Consider medium issues for future"),
        )

    if risk_score is not None and risk_score.level == "low":
        return Recommendation(action="approve", verdict="Safe to Merge", reason="No significant issues detected")

    return Recommendation(
        action="review",
        verdict="Review Recommended",
        reason=f"{summary.total} issue(s) found - review recommended",
        priority=("Review all findings before merging",),
    )


def merge_recommendations(first: Recommendation | None, second: Recommendation | None) -> Recommendation | None:
    """Return the more severe of two independently derived verdicts.

    Severity runs block, caution, review, approve. Ties keep ``first``; a
    missing side yields the other unchanged.
    """
    if first is None:
        return second
    if second is None:
        return first
    if ACTION_SEVERITY_RANK[second.action] < ACTION_SEVERITY_RANK[first.action]:
        return second
    return first
