"""Result records produced by scoring, noise reduction and orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field

from corroborate.model.entities import AggregatedFinding
from corroborate.types import DetectorName, JsonObject, RecommendationAction, RiskLevel, Severity


@dataclass(frozen=True)
class RiskScore:
    """0-100 scalar where 100 means no detected risk."""

    score: int
    level: RiskLevel
    description: str
    risk_points: int = 0

    def to_dict(self) -> JsonObject:
        return {
            "score": self.score,
            "level": self.level,
            "description": self.description,
            "risk_points": self.risk_points,
        }


@dataclass(frozen=True)
class Recommendation:
    """Merge verdict with the reasoning shown to reviewers."""

    action: RecommendationAction
    verdict: str
    reason: str
    priority: tuple[str, ...] = ()

    def to_dict(self) -> JsonObject:
        return {
            "action": self.action,
            "verdict": self.verdict,
            "reason": self.reason,
            "priority": list(self.priority),
        }


@dataclass(frozen=True)
class Summary:
    """Counts over one aggregated finding set."""

    total: int
    by_severity: dict[Severity, int]
    by_category: dict[str, int]
    by_tool: dict[DetectorName, int]
    corroborated: int
    uncorroborated: int
    average_confidence: float
    high_confidence_count: int
    raw_counts: dict[DetectorName, int] = field(default_factory=dict)
    filtered_out: int = 0

    def to_dict(self) -> JsonObject:
        return {
            "total": self.total,
            "by_severity": dict(self.by_severity),
            "by_category": dict(sorted(self.by_category.items())),
            "by_tool": dict(sorted(self.by_tool.items())),
            "corroborated": self.corroborated,
            "uncorroborated": self.uncorroborated,
            "average_confidence": self.average_confidence,
            "high_confidence_count": self.high_confidence_count,
            "raw_counts": dict(sorted(self.raw_counts.items())),
            "filtered_out": self.filtered_out,
        }


@dataclass(frozen=True)
class ChangesetSummary:
    """Changeset-level roll-up across analyzed files."""

    findings: Summary
    files_analyzed: int
    files_with_issues: int
    by_file: dict[str, int]

    def to_dict(self) -> JsonObject:
        return {
            "files_analyzed": self.files_analyzed,
            "files_with_issues": self.files_with_issues,
            "by_file": dict(sorted(self.by_file.items())),
            **self.findings.to_dict(),
        }


@dataclass(frozen=True)
class CorrelationReport:
    """How often tools agreed with each other across groups."""

    total_groups: int
    single_tool_groups: int
    two_tool_groups: int
    three_or_more_tool_groups: int
    agreement_matrix: dict[DetectorName, dict[DetectorName, int]]

    def to_dict(self) -> JsonObject:
        return {
            "total_groups": self.total_groups,
            "single_tool_groups": self.single_tool_groups,
            "two_tool_groups": self.two_tool_groups,
            "three_or_more_tool_groups": self.three_or_more_tool_groups,
            "agreement_matrix": {tool: dict(row) for tool, row in self.agreement_matrix.items()},
        }


@dataclass(frozen=True)
class DisplayGroup:
    """Presentation cluster of same-rule findings that sit close together."""

    primary: AggregatedFinding
    grouped_findings: tuple[AggregatedFinding, ...] = ()

    @property
    def group_count(self) -> int:
        return 1 + len(self.grouped_findings)

    def to_dict(self) -> JsonObject:
        payload = self.primary.to_dict()
        payload["group_count"] = self.group_count
        payload["grouped_findings"] = [finding.to_dict() for finding in self.grouped_findings]
        return payload


@dataclass(frozen=True)
class DetectorError:
    """A detector that failed on one file (or on the whole changeset)."""

    tool: DetectorName
    file_path: str | None
    error: str

    def to_dict(self) -> JsonObject:
        return {"tool": self.tool, "file_path": self.file_path, "error": self.error}


@dataclass(frozen=True)
class AnalysisStats:
    """Immutable per-run statistics snapshot."""

    files_analyzed: int = 0
    raw_findings: int = 0
    findings: int = 0
    detector_runs: int = 0
    detector_failures: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> JsonObject:
        return {
            "files_analyzed": self.files_analyzed,
            "raw_findings": self.raw_findings,
            "findings": self.findings,
            "detector_runs": self.detector_runs,
            "detector_failures": self.detector_failures,
            "duration_seconds": round(self.duration_seconds, 6),
        }


@dataclass(frozen=True)
class FileAnalysis:
    """Per-file slice of a changeset analysis."""

    file_path: str
    findings: tuple[AggregatedFinding, ...]
    summary: Summary
    risk_score: RiskScore
    truncated: bool = False
    original_count: int | None = None
    detector_errors: tuple[DetectorError, ...] = ()

    @property
    def success(self) -> bool:
        """False when a detector failed on this file and no findings are shown for it."""
        return not self.detector_errors or bool(self.findings)

    def to_dict(self) -> JsonObject:
        return {
            "file_path": self.file_path,
            "findings": [finding.to_dict() for finding in self.findings],
            "summary": self.summary.to_dict(),
            "risk_score": self.risk_score.to_dict(),
            "truncated": self.truncated,
            "original_count": self.original_count,
            "detector_errors": [error.to_dict() for error in self.detector_errors],
        }


@dataclass(frozen=True)
class PrContext:
    """Descriptive metadata of the analyzed changeset."""

    title: str = ""
    author: str | None = None
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0

    def to_dict(self) -> JsonObject:
        return {
            "title": self.title,
            "author": self.author,
            "files_changed": self.files_changed,
            "additions": self.additions,
            "deletions": self.deletions,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Final output for one file or one changeset."""

    findings: tuple[AggregatedFinding, ...]
    summary: ChangesetSummary
    risk_score: RiskScore
    recommendation: Recommendation
    unfiltered_count: int = 0
    display_groups: tuple[DisplayGroup, ...] = ()
    truncated: bool = False
    original_count: int | None = None
    files: tuple[FileAnalysis, ...] = ()
    correlation: CorrelationReport | None = None
    detector_errors: tuple[DetectorError, ...] = ()
    stats: AnalysisStats = AnalysisStats()
    pr_context: PrContext | None = None

    @property
    def findings_by_file(self) -> dict[str, list[AggregatedFinding]]:
        """Shown findings keyed by path, each list ordered by line."""
        grouped: dict[str, list[AggregatedFinding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.file_path or "unknown", []).append(finding)
        for items in grouped.values():
            items.sort(key=lambda finding: finding.line)
        return grouped

    def to_dict(self) -> JsonObject:
        return {
            "findings": [finding.to_dict() for finding in self.findings],
            "summary": self.summary.to_dict(),
            "risk_score": self.risk_score.to_dict(),
            "recommendation": self.recommendation.to_dict(),
            "unfiltered_count": self.unfiltered_count,
            "display_groups": [group.to_dict() for group in self.display_groups],
            "truncated": self.truncated,
            "original_count": self.original_count,
            "files": [file_analysis.to_dict() for file_analysis in self.files],
            "correlation": self.correlation.to_dict() if self.correlation is not None else None,
            "detector_errors": [error.to_dict() for error in self.detector_errors],
            "stats": self.stats.to_dict(),
            "pr_context": self.pr_context.to_dict() if self.pr_context is not None else None,
        }
