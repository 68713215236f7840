"""Shared type aliases for Corroborate."""

from .common import (
    DetectorName,
    FindingActionKind,
    JsonObject,
    JsonScalar,
    JsonValue,
    RecommendationAction,
    RiskLevel,
    Severity,
    SeverityThreshold,
)
from .config import AdaptiveConfig, CorrelationBonuses, IgnoreConfig

__all__ = [
    "AdaptiveConfig",
    "CorrelationBonuses",
    "DetectorName",
    "FindingActionKind",
    "IgnoreConfig",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "RecommendationAction",
    "RiskLevel",
    "Severity",
    "SeverityThreshold",
]
