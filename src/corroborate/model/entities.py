"""Finding entities shared by detectors, the aggregator and reporters."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from corroborate.constants.changeset import FINGERPRINT_HEX_LENGTH
from corroborate.types import DetectorName, JsonObject, Severity


@dataclass(frozen=True)
class Finding:
    """One detector's opinion about one location."""

    tool: DetectorName
    rule_id: str | None
    severity: Severity
    category: str
    message: str
    file_path: str
    line: int = 0
    confidence: float = 0.5
    cwe: str | None = None
    owasp: str | None = None
    owasp_category: str | None = None
    package_name: str | None = None
    installed_version: str | None = None
    code_snippet: str | None = None

    @property
    def fingerprint(self) -> str:
        """Stable identity used to track dismiss/resolve actions across runs."""
        identity = "|".join([self.rule_id or "", self.file_path, str(self.line)])
        return hashlib.sha256(identity.encode("utf-8")).hexdigest()[:FINGERPRINT_HEX_LENGTH]

    def to_dict(self) -> JsonObject:
        """Serialize with snake_case keys; optional fields are always present."""
        return {
            "tool": self.tool,
            "rule_id": self.rule_id,
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "file_path": self.file_path,
            "line": self.line,
            "confidence": self.confidence,
            "cwe": self.cwe,
            "owasp": self.owasp,
            "owasp_category": self.owasp_category,
            "package_name": self.package_name,
            "installed_version": self.installed_version,
            "code_snippet": self.code_snippet,
            "fingerprint": self.fingerprint,
        }


@dataclass(frozen=True)
class FindingGroup:
    """Findings judged to describe the same issue; the first member is the anchor."""

    members: tuple[Finding, ...]

    @property
    def anchor(self) -> Finding | None:
        return self.members[0] if self.members else None

    @property
    def tools(self) -> tuple[DetectorName, ...]:
        """Distinct contributing tools in first-seen order."""
        return tuple(dict.fromkeys(member.tool for member in self.members))

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class RelatedFinding:
    """Summary of a non-primary group member."""

    tool: DetectorName
    rule_id: str | None
    message: str
    confidence: float

    def to_dict(self) -> JsonObject:
        return {
            "tool": self.tool,
            "rule_id": self.rule_id,
            "message": self.message,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class AggregatedFinding:
    """A group's output record built around its primary finding.

    ``finding`` carries the representative identity (message, rule and
    location); ``confidence`` is the combined score and supersedes the
    primary's raw confidence.
    """

    finding: Finding
    confidence: float
    base_confidence: float
    correlation_bonus: float
    tools_detected: tuple[DetectorName, ...]
    num_tools_agreeing: int
    related_findings: tuple[RelatedFinding, ...] = ()
    llm_corroborated: bool = False
    llm_context: str | None = None
    adaptive_adjustment: float | None = None
    original_confidence: float | None = None
    severity_overridden: bool = False

    @property
    def is_corroborated(self) -> bool:
        return self.num_tools_agreeing > 1

    @property
    def tool(self) -> DetectorName:
        return self.finding.tool

    @property
    def rule_id(self) -> str | None:
        return self.finding.rule_id

    @property
    def severity(self) -> Severity:
        return self.finding.severity

    @property
    def category(self) -> str:
        return self.finding.category

    @property
    def message(self) -> str:
        return self.finding.message

    @property
    def file_path(self) -> str:
        return self.finding.file_path

    @property
    def line(self) -> int:
        return self.finding.line

    @property
    def fingerprint(self) -> str:
        return self.finding.fingerprint

    def to_dict(self) -> JsonObject:
        """Flatten the primary finding and the aggregation metadata into one object."""
        payload = self.finding.to_dict()
        payload.update(
            {
                "confidence": self.confidence,
                "base_confidence": self.base_confidence,
                "correlation_bonus": self.correlation_bonus,
                "tools_detected": list(self.tools_detected),
                "num_tools_agreeing": self.num_tools_agreeing,
                "is_corroborated": self.is_corroborated,
                "related_findings": [related.to_dict() for related in self.related_findings],
                "llm_corroborated": self.llm_corroborated,
                "llm_context": self.llm_context,
                "adaptive_adjustment": self.adaptive_adjustment,
                "original_confidence": self.original_confidence,
                "severity_overridden": self.severity_overridden,
            }
        )
        return payload


@dataclass(frozen=True)
class DetectorReport:
    """What a detector hands back for one file or one changeset.

    Findings may be ``Finding`` instances or raw mappings; mappings are
    normalized (and skipped when malformed) during dispatch.
    """

    findings: tuple[Finding | JsonObject, ...] = ()
    summary: JsonObject = field(default_factory=dict)
