"""Coercion of raw detector payloads into ``Finding`` models."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import replace
from typing import cast

from corroborate.constants.aggregation import DEFAULT_MISSING_CONFIDENCE
from corroborate.constants.config import VALID_SEVERITIES
from corroborate.model.entities import Finding
from corroborate.types import Severity

logger = logging.getLogger(__name__)

# snake_case field -> accepted payload keys, first match wins.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "rule_id": ("rule_id", "ruleId"),
    "file_path": ("file_path", "filePath"),
    "owasp_category": ("owasp_category", "owaspCategory"),
    "package_name": ("package_name", "packageName"),
    "installed_version": ("installed_version", "installedVersion"),
    "code_snippet": ("code_snippet", "codeSnippet"),
}


def _lookup(payload: Mapping[str, object], name: str) -> object:
    for key in _FIELD_ALIASES.get(name, (name,)):
        if key in payload:
            return payload[key]
    return None


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def as_severity(value: object) -> Severity | None:
    """Return a valid severity (case-insensitive) or ``None``."""
    if isinstance(value, str) and value.lower() in VALID_SEVERITIES:
        return cast(Severity, value.lower())
    return None


def as_confidence(value: object) -> float:
    """Clamp a confidence into [0, 1]; missing or non-numeric values become 0.5."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return DEFAULT_MISSING_CONFIDENCE
    return max(0.0, min(1.0, float(value)))


def as_line(value: object) -> int:
    """1-based line number, or 0 when unknown."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def finding_from_payload(
    payload: object,
    *,
    default_tool: str | None = None,
    default_file_path: str | None = None,
) -> Finding | None:
    """Build a ``Finding`` from a detector mapping, or ``None`` when malformed.

    Required fields are the tool (``default_tool`` fills it in), the file
    path, a known severity and a message (``description`` is accepted as a
    fallback). Malformed payloads are logged and skipped, never raised.
    ``default_file_path`` fills in a missing path, e.g. the file a per-file
    detector was run on.
    """
    if not isinstance(payload, Mapping):
        logger.warning("Skipping malformed finding payload of type %s", type(payload).__name__)
        return None

    tool = _optional_str(payload.get("tool")) or default_tool
    file_path = _optional_str(_lookup(payload, "file_path"))
    if file_path is None:
        file_path = default_file_path
    severity = as_severity(payload.get("severity"))
    message = _optional_str(payload.get("message")) or _optional_str(payload.get("description"))

    missing = [
        name
        for name, value in (("tool", tool), ("file_path", file_path), ("severity", severity), ("message", message))
        if value is None
    ]
    if missing:
        logger.warning(
            "Skipping malformed finding from %s: missing %s",
            tool or "unknown tool",
            ", ".join(missing),
        )
        return None

    assert tool is not None and file_path is not None and severity is not None and message is not None
    category = _optional_str(payload.get("category")) or "general"
    return Finding(
        tool=tool,
        rule_id=_optional_str(_lookup(payload, "rule_id")),
        severity=severity,
        category=category,
        message=message,
        file_path=file_path,
        line=as_line(payload.get("line")),
        confidence=as_confidence(payload.get("confidence")),
        cwe=_optional_str(payload.get("cwe")),
        owasp=_optional_str(payload.get("owasp")),
        owasp_category=_optional_str(_lookup(payload, "owasp_category")),
        package_name=_optional_str(_lookup(payload, "package_name")),
        installed_version=_optional_str(_lookup(payload, "installed_version")),
        code_snippet=_optional_str(_lookup(payload, "code_snippet")),
    )


def validate_finding(finding: Finding) -> Finding | None:
    """Apply the payload checks to an already-built ``Finding``.

    Findings with an unknown severity or a missing tool, path or message are
    logged and skipped. Confidence is clamped into [0, 1] and the line into
    non-negative integers; an unchanged finding is returned as-is.
    """
    severity = as_severity(finding.severity)
    missing = [
        name
        for name, value in (
            ("tool", _optional_str(finding.tool)),
            ("file_path", finding.file_path if isinstance(finding.file_path, str) else None),
            ("severity", severity),
            ("message", _optional_str(finding.message)),
        )
        if value is None
    ]
    if missing:
        logger.warning(
            "Skipping malformed finding from %s: invalid %s",
            _optional_str(finding.tool) or "unknown tool",
            ", ".join(missing),
        )
        return None

    confidence = as_confidence(finding.confidence)
    line = as_line(finding.line)
    category = _optional_str(finding.category) or "general"
    if (severity, confidence, line, category) == (finding.severity, finding.confidence, finding.line, finding.category):
        return finding
    return replace(finding, severity=severity, confidence=confidence, line=line, category=category)
