"""Constants for prompt rendering and report files."""

from __future__ import annotations

DEFAULT_PROMPT_MAX_FINDINGS: int = 15

PROMPT_HEADER: str = (
    "## Static Analysis Results\n\nThe following issues were detected by automated static analysis tools:\n"
)
PROMPT_FOOTER: str = (
    "Please incorporate these findings into your review. For each finding:\n"
    "1. Verify if it's a true positive or false positive\n"
    "2. Explain the security/quality implications\n"
    "3. Suggest specific fixes if appropriate\n"
)

REPORT_TEMP_PREFIX: str = ".tmp-"
REPORT_TEMP_SUFFIX: str = ".json"

VALID_OUTPUT_FORMATS: frozenset[str] = frozenset({"json", "prompt"})
DEFAULT_OUTPUT_FORMAT: str = "json"

SCHEMA_VERSION: str = "1.0.0"
