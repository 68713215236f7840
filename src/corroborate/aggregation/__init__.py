"""Finding grouping, confidence aggregation and summaries."""

from __future__ import annotations

from corroborate.aggregation.confidence import (
    AggregationOutcome,
    ConfidenceAggregator,
    build_correlation_report,
    extract_keywords,
    round2,
    sort_aggregated,
)
from corroborate.aggregation.grouping import are_related, categories_match, group_findings, rule_tokens
from corroborate.aggregation.summary import build_changeset_summary, build_summary, severity_counts

__all__ = [
    "AggregationOutcome",
    "ConfidenceAggregator",
    "are_related",
    "build_changeset_summary",
    "build_correlation_report",
    "build_summary",
    "categories_match",
    "extract_keywords",
    "group_findings",
    "round2",
    "rule_tokens",
    "severity_counts",
    "sort_aggregated",
]
