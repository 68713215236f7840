"""Tests for prompt-ready Markdown rendering."""

from __future__ import annotations

from collections.abc import Callable

from corroborate.constants.reporting import PROMPT_FOOTER, PROMPT_HEADER
from corroborate.model import AggregatedFinding
from corroborate.reporting.prompt import format_findings_for_prompt

AggregatedFactory = Callable[..., AggregatedFinding]


def test_no_findings_renders_nothing() -> None:
    assert format_findings_for_prompt([]) is None


def test_finding_block(make_aggregated: AggregatedFactory) -> None:
    finding = make_aggregated(
        severity="high",
        rule_id="sql-injection",
        message="User input reaches SQL query",
        file_path="app.js",
        line=42,
        confidence=0.82,
        cwe="CWE-89",
        owasp="A03:2021",
        tools=("semgrep", "eslint"),
    )

    text = format_findings_for_prompt([finding])

    assert text is not None
    assert text.startswith(PROMPT_HEADER)
    assert text.endswith(PROMPT_FOOTER)
    assert (
        "### HIGH: sql-injection\n"
        "- **File**: app.js:42\n"
        "- **Message**: User input reaches SQL query\n"
        "- **Confidence**: 82% (detected by: semgrep, eslint)\n"
        "- **CWE**: CWE-89\n"
        "- **OWASP**: A03:2021\n"
    ) in text


def test_missing_rule_and_line_fall_back(make_aggregated: AggregatedFactory) -> None:
    text = format_findings_for_prompt([make_aggregated(rule_id=None, category="quality", line=0)])

    assert text is not None
    assert "### MEDIUM: quality\n" in text
    assert "- **File**: src/app.js:?\n" in text
    assert "CWE" not in text


def test_truncation_line(make_aggregated: AggregatedFactory) -> None:
    findings = [make_aggregated(line=line) for line in range(1, 5)]

    text = format_findings_for_prompt(findings, max_findings=3)

    assert text is not None
    assert text.count("### ") == 3
    assert "*...and 1 more findings*" in text
