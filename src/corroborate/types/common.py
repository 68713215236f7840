"""Cross-module type aliases."""

from __future__ import annotations

from typing import Literal, TypeAlias

Severity: TypeAlias = Literal["critical", "high", "medium", "low", "info"]
SeverityThreshold: TypeAlias = Literal["all", "critical", "high", "medium", "low", "info"]
RiskLevel: TypeAlias = Literal["low", "medium", "high", "critical"]
RecommendationAction: TypeAlias = Literal["block", "caution", "review", "approve"]
FindingActionKind: TypeAlias = Literal["dismissed", "resolved"]

# Detector names are open-ended; unknown names fall back to default weights.
DetectorName: TypeAlias = str

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]
