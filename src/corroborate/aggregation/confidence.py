"""Combine grouped findings into scored, corroborated aggregate findings."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace

from corroborate.aggregation.grouping import categories_match, group_findings
from corroborate.config.model import AggregationConfig
from corroborate.constants.aggregation import (
    EMPTY_WEIGHT_BASE_CONFIDENCE,
    KEYWORD_STOPWORDS,
    MIN_KEYWORD_LENGTH,
    MIN_KEYWORD_OVERLAP,
)
from corroborate.constants.scoring import SEVERITY_ORDER
from corroborate.constants.tools import KNOWN_TOOLS, TOOL_LLM, TOOL_PRIORITY, UNKNOWN_TOOL_PRIORITY
from corroborate.model import (
    AggregatedFinding,
    CorrelationReport,
    Finding,
    FindingGroup,
    RelatedFinding,
    finding_from_payload,
    validate_finding,
)
from corroborate.types import DetectorName

logger = logging.getLogger(__name__)

_KEYWORD_SPLIT = re.compile(r"\W+")
_SEVERITY_POSITION = {severity: index for index, severity in enumerate(SEVERITY_ORDER)}


def round2(value: float) -> float:
    """Round half-up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def extract_keywords(text: str) -> list[str]:
    """Lower-cased words longer than three characters, minus stopwords."""
    return [
        word
        for word in _KEYWORD_SPLIT.split(text.lower())
        if len(word) >= MIN_KEYWORD_LENGTH and word not in KEYWORD_STOPWORDS
    ]


def sort_aggregated(findings: Iterable[AggregatedFinding]) -> list[AggregatedFinding]:
    """Order by confidence (highest first), then by severity (most severe first)."""
    return sorted(
        findings,
        key=lambda finding: (-finding.confidence, _SEVERITY_POSITION.get(finding.severity, len(SEVERITY_ORDER))),
    )


def build_correlation_report(groups: Sequence[FindingGroup]) -> CorrelationReport:
    """Count tool agreement across groups.

    The matrix is symmetric and always has rows for the known tools; tools
    outside that set get rows as they appear.
    """
    matrix: dict[DetectorName, dict[DetectorName, int]] = {}

    def _ensure_row(tool: DetectorName) -> None:
        if tool in matrix:
            return
        for row in matrix.values():
            row[tool] = 0
        matrix[tool] = {other: 0 for other in [*matrix, tool]}

    for tool in KNOWN_TOOLS:
        _ensure_row(tool)

    single = two = three_or_more = 0
    for group in groups:
        tools = group.tools
        if not tools:
            continue
        if len(tools) == 1:
            single += 1
        elif len(tools) == 2:
            two += 1
        else:
            three_or_more += 1

        for tool in tools:
            _ensure_row(tool)
        for i, first in enumerate(tools):
            for second in tools[i + 1 :]:
                matrix[first][second] += 1
                matrix[second][first] += 1

    return CorrelationReport(
        total_groups=len(groups),
        single_tool_groups=single,
        two_tool_groups=two,
        three_or_more_tool_groups=three_or_more,
        agreement_matrix=matrix,
    )


@dataclass(frozen=True)
class AggregationOutcome:
    """Everything one aggregation pass produced."""

    findings: tuple[AggregatedFinding, ...]
    unfiltered_count: int
    groups: tuple[FindingGroup, ...]
    correlation: CorrelationReport


class ConfidenceAggregator:
    """Turn finding groups into aggregate findings with combined confidence.

    The aggregator holds no mutable state; every value it needs comes from
    the ``AggregationConfig`` handed to it at construction.
    """

    def __init__(self, config: AggregationConfig | None = None) -> None:
        self.config = config or AggregationConfig()

    def group(self, findings: Sequence[Finding]) -> list[FindingGroup]:
        """Cluster findings, or wrap each one alone when deduplication is off.

        Malformed findings are skipped with a warning before clustering.
        """
        findings = [checked for checked in map(validate_finding, findings) if checked is not None]
        if not self.config.enable_deduplication:
            return [FindingGroup(members=(finding,)) for finding in findings]
        return group_findings(findings, fuzzy_line_matching=self.config.fuzzy_line_matching)

    def select_primary(self, group: FindingGroup) -> Finding:
        """Representative member: best tool priority, then highest confidence."""
        ordered = sorted(
            group.members,
            key=lambda finding: (TOOL_PRIORITY.get(finding.tool, UNKNOWN_TOOL_PRIORITY), -finding.confidence),
        )
        return ordered[0]

    def correlation_bonus(self, tools: Sequence[DetectorName]) -> float:
        if not self.config.enable_correlation:
            return 0.0
        bonuses = self.config.correlation_bonuses
        bonus = 0.0
        if len(tools) >= 3:
            bonus = bonuses.three_tools
        elif len(tools) == 2:
            bonus = bonuses.two_tools
        if TOOL_LLM in tools and len(tools) > 1:
            bonus += bonuses.llm_corroboration
        return bonus

    def aggregate(self, group: FindingGroup) -> AggregatedFinding | None:
        """Score one group; an empty group yields ``None``."""
        if not group.members:
            logger.debug("Skipping empty finding group")
            return None

        weighted = 0.0
        total_weight = 0.0
        for finding in group.members:
            weight = self.config.tool_weight(finding.tool)
            weighted += weight * finding.confidence
            total_weight += weight
        base = weighted / total_weight if total_weight > 0 else EMPTY_WEIGHT_BASE_CONFIDENCE

        tools = group.tools
        bonus = self.correlation_bonus(tools)
        primary = self.select_primary(group)
        related = tuple(
            RelatedFinding(
                tool=member.tool,
                rule_id=member.rule_id,
                message=member.message,
                confidence=member.confidence,
            )
            for member in group.members
            if member is not primary
        )

        return AggregatedFinding(
            finding=primary,
            confidence=round2(min(1.0, base + bonus)),
            base_confidence=round2(base),
            correlation_bonus=round2(bonus),
            tools_detected=tools,
            num_tools_agreeing=len(tools),
            related_findings=related,
        )

    def aggregate_groups(self, groups: Iterable[FindingGroup]) -> list[AggregatedFinding]:
        aggregated = []
        for group in groups:
            result = self.aggregate(group)
            if result is not None:
                aggregated.append(result)
        return aggregated

    def filter_by_confidence(self, findings: Iterable[AggregatedFinding]) -> list[AggregatedFinding]:
        """Keep findings at or above ``min_confidence_threshold``."""
        threshold = self.config.min_confidence_threshold
        return [finding for finding in findings if finding.confidence >= threshold]

    def aggregate_findings(self, findings: Sequence[Finding]) -> AggregationOutcome:
        """Group, score, threshold and sort a raw finding set."""
        groups = self.group(findings)
        aggregated = self.aggregate_groups(groups)
        kept = sort_aggregated(self.filter_by_confidence(aggregated))
        logger.debug(
            "Aggregated %d raw findings into %d groups, %d above threshold",
            len(findings),
            len(groups),
            len(kept),
        )
        return AggregationOutcome(
            findings=tuple(kept),
            unfiltered_count=len(aggregated),
            groups=tuple(groups),
            correlation=build_correlation_report(groups),
        )

    def find_llm_match(self, finding: AggregatedFinding, llm_findings: Sequence[Finding]) -> Finding | None:
        """First LLM finding that corroborates ``finding``, if any."""
        keywords = set(extract_keywords(finding.message))
        for candidate in llm_findings:
            if candidate.file_path and candidate.file_path != finding.file_path:
                continue
            if candidate.line and finding.line and abs(candidate.line - finding.line) > self.config.fuzzy_line_matching:
                continue
            if categories_match(finding.finding, candidate):
                return candidate
            overlap = keywords.intersection(extract_keywords(candidate.message))
            if len(overlap) >= MIN_KEYWORD_OVERLAP:
                return candidate
        return None

    def apply_llm_corroboration(
        self,
        findings: Sequence[AggregatedFinding],
        llm_findings: Sequence[Finding | Mapping[str, object]],
    ) -> list[AggregatedFinding]:
        """Boost findings that a later LLM pass independently confirmed.

        Findings already marked ``llm_corroborated`` are left alone, so
        re-applying the same LLM results never adds the bonus twice.
        """
        candidates = _as_llm_findings(llm_findings)
        if not candidates:
            return list(findings)

        bonus = self.config.correlation_bonuses.llm_corroboration
        updated: list[AggregatedFinding] = []
        for finding in findings:
            if finding.llm_corroborated:
                updated.append(finding)
                continue
            match = self.find_llm_match(finding, candidates)
            if match is None:
                updated.append(finding)
                continue
            tools = finding.tools_detected if TOOL_LLM in finding.tools_detected else (*finding.tools_detected, TOOL_LLM)
            updated.append(
                replace(
                    finding,
                    confidence=round2(min(1.0, finding.confidence + bonus)),
                    llm_corroborated=True,
                    llm_context=match.message,
                    tools_detected=tools,
                )
            )
        return updated


def _as_llm_findings(items: Sequence[Finding | Mapping[str, object]]) -> list[Finding]:
    findings: list[Finding] = []
    for item in items:
        if isinstance(item, Finding):
            finding = validate_finding(item)
        else:
            payload = {"severity": "info", **item} if isinstance(item, Mapping) else item
            finding = finding_from_payload(payload, default_tool=TOOL_LLM, default_file_path="")
        if finding is not None:
            findings.append(finding)
    return findings
