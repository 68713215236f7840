"""Tests for finding summaries."""

from __future__ import annotations

from collections.abc import Callable

from corroborate.aggregation.summary import build_changeset_summary, build_summary, severity_counts
from corroborate.model import AggregatedFinding, Finding


def test_severity_counts_always_has_all_levels(make_aggregated: Callable[..., AggregatedFinding]) -> None:
    counts = severity_counts([make_aggregated(severity="high")])

    assert counts == {"critical": 0, "high": 1, "medium": 0, "low": 0, "info": 0}


def test_empty_summary_defaults() -> None:
    summary = build_summary([])

    assert summary.total == 0
    assert summary.average_confidence == 1.0
    assert summary.by_tool == {"eslint": 0, "semgrep": 0, "dependency": 0, "eol": 0, "llm": 0}
    assert summary.filtered_out == 0


def test_summary_counts(
    make_aggregated: Callable[..., AggregatedFinding],
    make_finding: Callable[..., Finding],
) -> None:
    findings = [
        make_aggregated(confidence=0.9, severity="critical", category="security", tools=("semgrep", "eslint")),
        make_aggregated(confidence=0.5, severity="medium", category="quality"),
    ]
    raw = [make_finding(tool="semgrep"), make_finding(tool="eslint"), make_finding(tool="semgrep")]

    summary = build_summary(findings, raw)

    assert summary.total == 2
    assert summary.by_severity["critical"] == 1
    assert summary.by_category == {"security": 1, "quality": 1}
    assert summary.by_tool["semgrep"] == 2
    assert summary.by_tool["eslint"] == 1
    assert summary.corroborated == 1
    assert summary.uncorroborated == 1
    assert summary.average_confidence == 0.7
    assert summary.high_confidence_count == 1
    assert summary.raw_counts == {"semgrep": 2, "eslint": 1}
    assert summary.filtered_out == 1


def test_summary_counts_unknown_tools(make_aggregated: Callable[..., AggregatedFinding]) -> None:
    summary = build_summary([make_aggregated(tool="secrets")])

    assert summary.by_tool["secrets"] == 1


def test_explicit_filtered_out_wins(make_aggregated: Callable[..., AggregatedFinding]) -> None:
    assert build_summary([make_aggregated()], filtered_out=7).filtered_out == 7


def test_changeset_summary_drops_clean_files(make_aggregated: Callable[..., AggregatedFinding]) -> None:
    findings = [make_aggregated(file_path="a.js"), make_aggregated(file_path="a.js", line=40)]

    summary = build_changeset_summary(findings, files_analyzed=3, per_file_counts={"a.js": 2, "b.js": 0})

    assert summary.files_analyzed == 3
    assert summary.files_with_issues == 1
    assert summary.by_file == {"a.js": 2}
    assert summary.findings.total == 2


def test_changeset_summary_counts_paths_by_default(make_aggregated: Callable[..., AggregatedFinding]) -> None:
    findings = [make_aggregated(file_path="a.js"), make_aggregated(file_path="b.js")]

    summary = build_changeset_summary(findings, files_analyzed=2)

    assert summary.by_file == {"a.js": 1, "b.js": 1}
