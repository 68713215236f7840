"""Markdown rendering of findings for injection into a review prompt."""

from __future__ import annotations

import math
from collections.abc import Sequence

from corroborate.constants.reporting import DEFAULT_PROMPT_MAX_FINDINGS, PROMPT_FOOTER, PROMPT_HEADER
from corroborate.model import AggregatedFinding


def _format_finding(finding: AggregatedFinding) -> str:
    percent = math.floor(finding.confidence * 100 + 0.5)
    tools = ", ".join(finding.tools_detected) or finding.tool or "unknown"
    lines = [
        f"### {finding.severity.upper()}: {finding.rule_id or finding.category}",
        f"- **File**: {finding.file_path}:{finding.line or '?'}",
        f"- **Message**: {finding.message}",
        f"- **Confidence**: {percent}% (detected by: {tools})",
    ]
    if finding.finding.cwe:
        lines.append(f"- **CWE**: {finding.finding.cwe}")
    owasp = finding.finding.owasp or finding.finding.owasp_category
    if owasp:
        lines.append(f"- **OWASP**: {owasp}")
    return "\n".join(lines) + "\n"


def format_findings_for_prompt(
    findings: Sequence[AggregatedFinding],
    max_findings: int = DEFAULT_PROMPT_MAX_FINDINGS,
) -> str | None:
    """Render the top findings as Markdown; ``None`` when there are none.

    Findings keep their given order. Anything past ``max_findings`` is
    summarized in a single "...and N more findings" line.
    """
    if not findings:
        return None

    sections = [PROMPT_HEADER]
    sections.extend(_format_finding(finding) for finding in findings[:max_findings])
    if len(findings) > max_findings:
        sections.append(f"*...and {len(findings) - max_findings} more findings*\n")
    sections.append(PROMPT_FOOTER)
    return "\n".join(sections)
