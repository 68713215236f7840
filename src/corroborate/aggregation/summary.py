"""Count summaries over aggregated finding sets."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

from corroborate.aggregation.confidence import round2
from corroborate.constants.aggregation import HIGH_CONFIDENCE_MIN
from corroborate.constants.scoring import SEVERITY_ORDER
from corroborate.constants.tools import KNOWN_TOOLS
from corroborate.model import AggregatedFinding, ChangesetSummary, Finding, Summary
from corroborate.types import DetectorName, Severity


def severity_counts(findings: Sequence[AggregatedFinding]) -> dict[Severity, int]:
    """Per-severity counts with all five levels present."""
    counts: dict[Severity, int] = {severity: 0 for severity in SEVERITY_ORDER}  # type: ignore[misc]
    for finding in findings:
        counts[finding.severity] = counts.get(finding.severity, 0) + 1
    return counts


def build_summary(
    findings: Sequence[AggregatedFinding],
    raw_findings: Sequence[Finding] = (),
    *,
    filtered_out: int | None = None,
) -> Summary:
    """Summarize aggregated findings.

    ``raw_findings`` feeds the per-tool raw counts. When ``filtered_out`` is
    not given it is estimated as raw findings minus aggregated findings.
    """
    by_tool: dict[DetectorName, int] = {tool: 0 for tool in KNOWN_TOOLS}
    by_category: Counter[str] = Counter()
    corroborated = 0
    for finding in findings:
        by_category[finding.category] += 1
        for tool in finding.tools_detected:
            by_tool[tool] = by_tool.get(tool, 0) + 1
        if finding.is_corroborated:
            corroborated += 1

    total = len(findings)
    average = sum(finding.confidence for finding in findings) / total if total else 1.0
    raw_counts = dict(Counter(finding.tool for finding in raw_findings))
    if filtered_out is None:
        filtered_out = max(0, len(raw_findings) - total)

    return Summary(
        total=total,
        by_severity=severity_counts(findings),
        by_category=dict(by_category),
        by_tool=by_tool,
        corroborated=corroborated,
        uncorroborated=total - corroborated,
        average_confidence=round2(average),
        high_confidence_count=sum(1 for finding in findings if finding.confidence >= HIGH_CONFIDENCE_MIN),
        raw_counts=raw_counts,
        filtered_out=filtered_out,
    )


def build_changeset_summary(
    findings: Sequence[AggregatedFinding],
    raw_findings: Sequence[Finding] = (),
    *,
    files_analyzed: int,
    per_file_counts: Mapping[str, int] | None = None,
    filtered_out: int | None = None,
) -> ChangesetSummary:
    """Changeset roll-up; per-file counts default to the findings' own paths."""
    if per_file_counts is None:
        per_file_counts = Counter(finding.file_path for finding in findings)
    by_file = {path: count for path, count in per_file_counts.items() if count}
    return ChangesetSummary(
        findings=build_summary(findings, raw_findings, filtered_out=filtered_out),
        files_analyzed=files_analyzed,
        files_with_issues=len(by_file),
        by_file=by_file,
    )
