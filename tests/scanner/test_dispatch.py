"""Tests for detector dispatch and failure isolation."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from corroborate.model import Changeset, DetectorReport
from corroborate.scanner.pipeline.changeset import AnalysisTarget
from corroborate.scanner.pipeline.dispatch import (
    DetectorFailure,
    DetectorSuccess,
    collect_errors,
    collect_findings,
    normalize_report,
    run_changeset_detectors,
    run_file_detector,
    run_file_detectors,
)

_ISSUE = {"rule_id": "no-eval", "severity": "high", "category": "security", "message": "eval() call", "line": 3}


class TestNormalizeReport:
    def test_none_is_empty(self) -> None:
        assert normalize_report(None, tool="eslint", file_path="a.js", stamp_tool=True) == ((), {})

    def test_mapping_report_stamps_tool_and_path(self) -> None:
        report = {"findings": [{**_ISSUE, "tool": "other"}], "summary": {"rules": 12}}

        findings, summary = normalize_report(report, tool="eslint", file_path="a.js", stamp_tool=True)

        assert [(f.tool, f.file_path) for f in findings] == [("eslint", "a.js")]
        assert summary == {"rules": 12}

    def test_malformed_items_are_skipped(self) -> None:
        report = DetectorReport(findings=({"severity": "high"}, _ISSUE))

        findings, _ = normalize_report(report, tool="eslint", file_path="a.js", stamp_tool=True)

        assert len(findings) == 1

    def test_malformed_finding_instances_are_skipped(self, make_finding: Callable[..., Any]) -> None:
        report = DetectorReport(
            findings=(make_finding(severity="warning"), make_finding(tool="other", confidence=1.4)),
        )

        findings, _ = normalize_report(report, tool="eslint", file_path="a.js", stamp_tool=True)

        assert [(f.tool, f.confidence) for f in findings] == [("eslint", 1.0)]

    def test_unsupported_report_type(self) -> None:
        assert normalize_report("oops", tool="eslint", file_path="a.js", stamp_tool=True) == ((), {})

    def test_changeset_reports_keep_their_own_tools(self) -> None:
        report = DetectorReport(findings=({**_ISSUE, "tool": "dependency", "file_path": "package.json"}, _ISSUE))

        findings, _ = normalize_report(report, tool="eol", file_path=None, stamp_tool=False)

        # The second item has no path and the changeset run supplies none.
        assert [(f.tool, f.file_path) for f in findings] == [("dependency", "package.json")]


def test_detector_that_does_not_apply_is_skipped(make_detector: Callable[..., Any]) -> None:
    detector = make_detector("eslint", [_ISSUE], extensions=(".js",))

    outcome = asyncio.run(run_file_detector(detector, AnalysisTarget(file_path="app.py", code="x = 1")))

    assert outcome is None
    assert detector.calls == []


def test_raising_detector_becomes_failure(make_detector: Callable[..., Any]) -> None:
    detector = make_detector("semgrep", error=RuntimeError("semgrep binary missing"))

    outcome = asyncio.run(run_file_detector(detector, AnalysisTarget(file_path="a.js", code="x")))

    assert outcome == DetectorFailure(tool="semgrep", file_path="a.js", error="semgrep binary missing")
    assert outcome.to_error().to_dict() == {"tool": "semgrep", "file_path": "a.js", "error": "semgrep binary missing"}


def test_failure_without_message_uses_exception_name(make_detector: Callable[..., Any]) -> None:
    detector = make_detector("semgrep", error=TimeoutError())

    outcome = asyncio.run(run_file_detector(detector, AnalysisTarget(file_path="a.js", code="x")))

    assert isinstance(outcome, DetectorFailure)
    assert outcome.error == "TimeoutError"


def test_one_failure_does_not_affect_other_detectors(make_detector: Callable[..., Any]) -> None:
    detectors = [make_detector("semgrep", error=ValueError("boom")), make_detector("eslint", [_ISSUE])]
    targets = [AnalysisTarget(file_path="a.js", code="x")]

    (outcomes,) = asyncio.run(run_file_detectors(targets, detectors))

    assert [type(outcome) for outcome in outcomes] == [DetectorFailure, DetectorSuccess]
    assert [f.tool for f in collect_findings(outcomes)] == ["eslint"]
    assert [error.tool for error in collect_errors(outcomes)] == ["semgrep"]


def test_parallel_and_sequential_runs_agree(make_detector: Callable[..., Any]) -> None:
    targets = [AnalysisTarget(file_path=name, code="x") for name in ("a.js", "b.js", "c.js")]

    def detectors() -> list[Any]:
        return [make_detector("semgrep", [_ISSUE], delay=0.01), make_detector("eslint", [_ISSUE])]

    parallel = asyncio.run(run_file_detectors(targets, detectors(), parallel=True))
    sequential = asyncio.run(run_file_detectors(targets, detectors(), parallel=False))

    assert parallel == sequential
    assert [[outcome.file_path for outcome in per_target] for per_target in parallel] == [
        ["a.js", "a.js"],
        ["b.js", "b.js"],
        ["c.js", "c.js"],
    ]


def test_changeset_detectors_receive_findings(make_changeset_detector: Callable[..., Any]) -> None:
    secrets = make_changeset_detector("secrets", [{**_ISSUE, "file_path": ".env", "category": "secrets"}])
    broken = make_changeset_detector("eol", error=ConnectionError("registry unreachable"))

    outcomes = asyncio.run(run_changeset_detectors(Changeset(), [secrets, broken], ()))

    assert secrets.seen == [()]
    assert [f.tool for f in collect_findings(outcomes)] == ["secrets"]
    assert collect_errors(outcomes)[0].file_path is None
