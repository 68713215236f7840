"""Tests for risk scoring and merge recommendations."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from corroborate.aggregation.summary import build_summary
from corroborate.model import AggregatedFinding, Recommendation, RiskScore
from corroborate.scanner.recommendation import merge_recommendations, recommend
from corroborate.scanner.score import risk_level_from_score, score_risk

AggregatedFactory = Callable[..., AggregatedFinding]


def test_risk_level_boundaries() -> None:
    assert risk_level_from_score(100) == "low"
    assert risk_level_from_score(80) == "low"
    assert risk_level_from_score(79) == "medium"
    assert risk_level_from_score(60) == "medium"
    assert risk_level_from_score(59) == "high"
    assert risk_level_from_score(40) == "high"
    assert risk_level_from_score(39) == "critical"
    assert risk_level_from_score(0) == "critical"


def test_no_findings_is_clean() -> None:
    risk = score_risk([])

    assert risk == RiskScore(score=100, level="low", description="No issues detected", risk_points=0)


def test_single_critical_finding(make_aggregated: AggregatedFactory) -> None:
    risk = score_risk([make_aggregated(severity="critical", confidence=0.8)])

    assert risk.score == 92
    assert risk.level == "low"
    assert risk.risk_points == 8


def test_two_critical_findings(make_aggregated: AggregatedFactory) -> None:
    risk = score_risk([make_aggregated(severity="critical", confidence=1.0, line=line) for line in (1, 50)])

    assert risk.score == 80
    assert risk.level == "low"


def test_score_saturates_at_zero(make_aggregated: AggregatedFactory) -> None:
    findings = [make_aggregated(severity="critical", confidence=1.0, line=line) for line in range(1, 21)]

    risk = score_risk(findings)

    assert risk.score == 0
    assert risk.level == "critical"
    assert risk.risk_points == 100
    assert risk.description.startswith("Critical")


def test_corroboration_multiplies_risk(make_aggregated: AggregatedFactory) -> None:
    risk = score_risk([make_aggregated(severity="high", confidence=0.5, tools=("semgrep", "eslint"))])

    assert risk.score == 95
    assert risk.risk_points == 5


def test_more_findings_never_raise_the_score(make_aggregated: AggregatedFactory) -> None:
    findings = [make_aggregated(severity="low", confidence=0.6, line=line) for line in range(1, 8)]

    scores = [score_risk(findings[:count]).score for count in range(len(findings) + 1)]

    assert scores == sorted(scores, reverse=True)


class TestRecommend:
    def test_missing_summary(self) -> None:
        recommendation = recommend(None, None)

        assert recommendation.action == "review"
        assert recommendation.verdict == "Unable to analyze"

    def test_critical_blocks(self, make_aggregated: AggregatedFactory) -> None:
        findings = [make_aggregated(severity="critical", confidence=0.8)]

        recommendation = recommend(build_summary(findings), score_risk(findings))

        assert recommendation.action == "block"
        assert recommendation.verdict == "Changes Requested"
        assert recommendation.reason.startswith("1 critical issue(s)")
        assert recommendation.priority

    def test_many_high_needs_review(self, make_aggregated: AggregatedFactory) -> None:
        findings = [make_aggregated(severity="high", line=line) for line in range(1, 5)]

        recommendation = recommend(build_summary(findings), score_risk(findings))

        assert recommendation.action == "review"
        assert recommendation.verdict == "Needs Review"

    @pytest.mark.parametrize(("high", "medium"), [(1, 0), (3, 0), (0, 6)])
    def test_caution(self, make_aggregated: AggregatedFactory, high: int, medium: int) -> None:
        findings = [make_aggregated(severity="high", line=line) for line in range(high)]
        findings += [make_aggregated(severity="medium", line=100 + line) for line in range(medium)]

        recommendation = recommend(build_summary(findings), score_risk(findings))

        assert recommendation.action == "caution"
        assert recommendation.reason == f"{high} high and {medium} medium issues found"

    def test_low_risk_approves(self, make_aggregated: AggregatedFactory) -> None:
        findings = [make_aggregated(severity="medium", confidence=0.5, line=line) for line in range(5)]
        risk = score_risk(findings)

        recommendation = recommend(build_summary(findings), risk)

        assert risk.score == 88
        assert recommendation.action == "approve"
        assert recommendation.verdict == "Safe to Merge"
        assert recommendation.priority == ()

    def test_elevated_risk_without_severe_findings(self, make_aggregated: AggregatedFactory) -> None:
        findings = [
            make_aggregated(severity="medium", confidence=1.0, line=line, tools=("semgrep", "eslint"))
            for line in range(5)
        ]
        risk = score_risk(findings)

        recommendation = recommend(build_summary(findings), risk)

        assert risk.score == 70
        assert risk.level == "medium"
        assert recommendation.action == "review"
        assert recommendation.verdict == "Review Recommended"
        assert recommendation.reason == "5 issue(s) found - review recommended"


def _rec(action: str) -> Recommendation:
    return Recommendation(action=action, verdict=action.title(), reason="r")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        ("approve", "block", "block"),
        ("block", "caution", "block"),
        ("review", "caution", "caution"),
        ("caution", "review", "caution"),
        ("approve", "review", "review"),
    ],
)
def test_merge_recommendations_keeps_most_severe(first: str, second: str, expected: str) -> None:
    merged = merge_recommendations(_rec(first), _rec(second))

    assert merged is not None
    assert merged.action == expected


def test_merge_recommendations_ties_keep_first() -> None:
    first = Recommendation(action="review", verdict="First", reason="a")
    second = Recommendation(action="review", verdict="Second", reason="b")

    assert merge_recommendations(first, second) is first


def test_merge_recommendations_with_missing_side() -> None:
    only = _rec("caution")

    assert merge_recommendations(None, only) is only
    assert merge_recommendations(only, None) is only
    assert merge_recommendations(None, None) is None
