"""Presentation-side noise reduction over aggregated findings.

None of these filters change confidence or risk; the orchestrator scores
risk before they run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from corroborate.config.model import CorroborateConfig
from corroborate.constants.config import (
    DEFAULT_DISPLAY_LINE_PROXIMITY,
    DEFAULT_MAX_FINDINGS_PER_FILE,
    DEFAULT_SEVERITY_THRESHOLD,
)
from corroborate.constants.scoring import SEVERITY_RANK
from corroborate.model import AggregatedFinding, DisplayGroup
from corroborate.types import SeverityThreshold


@dataclass(frozen=True)
class NoiseFilters:
    """Display filters that do not affect aggregation or scoring."""

    severity_threshold: SeverityThreshold = DEFAULT_SEVERITY_THRESHOLD  # type: ignore[assignment]
    group_related: bool = True
    display_line_proximity: int = DEFAULT_DISPLAY_LINE_PROXIMITY
    max_findings_per_file: int = DEFAULT_MAX_FINDINGS_PER_FILE

    @classmethod
    def from_config(cls, config: CorroborateConfig) -> NoiseFilters:
        return cls(
            severity_threshold=config.severity_threshold,
            group_related=config.group_related_findings,
            display_line_proximity=config.display_line_proximity,
            max_findings_per_file=config.max_findings_per_file,
        )


@dataclass(frozen=True)
class NoiseReduction:
    """Findings left for display plus what was hidden."""

    findings: tuple[AggregatedFinding, ...]
    display_groups: tuple[DisplayGroup, ...]
    pre_display_count: int
    truncated: bool = False
    original_count: int | None = None


def apply_severity_threshold(
    findings: Sequence[AggregatedFinding],
    threshold: SeverityThreshold | None,
) -> list[AggregatedFinding]:
    """Drop findings less severe than ``threshold``; ``all`` keeps everything."""
    if not threshold or threshold == "all":
        return list(findings)
    minimum = SEVERITY_RANK[threshold]
    return [finding for finding in findings if SEVERITY_RANK[finding.severity] >= minimum]


def group_related_findings(
    findings: Sequence[AggregatedFinding],
    *,
    line_proximity: int = DEFAULT_DISPLAY_LINE_PROXIMITY,
) -> list[DisplayGroup]:
    """Cluster same-rule findings in the same file near an anchor, for display only."""
    groups: list[DisplayGroup] = []
    used = [False] * len(findings)
    for i, primary in enumerate(findings):
        if used[i]:
            continue
        used[i] = True
        grouped: list[AggregatedFinding] = []
        for j in range(i + 1, len(findings)):
            if used[j]:
                continue
            candidate = findings[j]
            if (
                candidate.rule_id == primary.rule_id
                and candidate.file_path == primary.file_path
                and abs(candidate.line - primary.line) <= line_proximity
            ):
                used[j] = True
                grouped.append(candidate)
        groups.append(DisplayGroup(primary=primary, grouped_findings=tuple(grouped)))
    return groups


def cap_findings_per_file(
    findings: Sequence[AggregatedFinding],
    max_per_file: int,
) -> tuple[list[AggregatedFinding], bool]:
    """Keep at most ``max_per_file`` findings per path, preserving order.

    Returns the kept findings and whether anything was dropped.
    """
    seen: dict[str, int] = {}
    kept: list[AggregatedFinding] = []
    for finding in findings:
        count = seen.get(finding.file_path, 0)
        if count >= max_per_file:
            continue
        seen[finding.file_path] = count + 1
        kept.append(finding)
    return kept, len(kept) < len(findings)


def apply_noise_reduction(findings: Sequence[AggregatedFinding], filters: NoiseFilters) -> NoiseReduction:
    """Severity threshold, then per-file cap, then display grouping."""
    shown = apply_severity_threshold(findings, filters.severity_threshold)
    capped, truncated = cap_findings_per_file(shown, filters.max_findings_per_file)
    groups = (
        group_related_findings(capped, line_proximity=filters.display_line_proximity)
        if filters.group_related
        else []
    )
    return NoiseReduction(
        findings=tuple(capped),
        display_groups=tuple(groups),
        pre_display_count=len(findings),
        truncated=truncated,
        original_count=len(shown) if truncated else None,
    )
