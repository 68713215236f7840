"""Defaults for finding grouping and confidence aggregation."""

from __future__ import annotations

DEFAULT_TWO_TOOL_BONUS: float = 0.15
DEFAULT_THREE_TOOL_BONUS: float = 0.25
DEFAULT_LLM_CORROBORATION_BONUS: float = 0.10

DEFAULT_MIN_CONFIDENCE_THRESHOLD: float = 0.4
DEFAULT_FUZZY_LINE_MATCHING: int = 5
DEFAULT_MISSING_CONFIDENCE: float = 0.5
EMPTY_WEIGHT_BASE_CONFIDENCE: float = 0.5

# Same-severity findings this close are related even without a category match.
SEVERITY_MATCH_LINE_WINDOW: int = 2
MIN_RULE_TOKEN_OVERLAP: int = 2
MIN_KEYWORD_OVERLAP: int = 2
MIN_KEYWORD_LENGTH: int = 4

HIGH_CONFIDENCE_MIN: float = 0.7

SECURITY_EQUIVALENT_CATEGORIES: frozenset[str] = frozenset(
    {
        "security",
        "injection",
        "A03:2021-Injection",
        "A01:2021-Broken Access Control",
        "A02:2021-Cryptographic Failures",
        "A07:2021-Identification and Authentication Failures",
    }
)

KEYWORD_STOPWORDS: frozenset[str] = frozenset(
    {"the", "a", "an", "is", "are", "was", "be", "to", "of", "and", "in", "for", "on", "with"}
)
