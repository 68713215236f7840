"""Core data models for Corroborate."""

from .changeset import ChangedFile, Changeset
from .entities import (
    AggregatedFinding,
    DetectorReport,
    Finding,
    FindingGroup,
    RelatedFinding,
)
from .normalize import finding_from_payload, validate_finding
from .results import (
    AnalysisResult,
    AnalysisStats,
    ChangesetSummary,
    CorrelationReport,
    DetectorError,
    DisplayGroup,
    FileAnalysis,
    PrContext,
    Recommendation,
    RiskScore,
    Summary,
)

__all__ = [
    "AggregatedFinding",
    "AnalysisResult",
    "AnalysisStats",
    "ChangedFile",
    "Changeset",
    "ChangesetSummary",
    "CorrelationReport",
    "DetectorError",
    "DetectorReport",
    "DisplayGroup",
    "FileAnalysis",
    "Finding",
    "FindingGroup",
    "PrContext",
    "Recommendation",
    "RelatedFinding",
    "RiskScore",
    "Summary",
    "finding_from_payload",
    "validate_finding",
]
