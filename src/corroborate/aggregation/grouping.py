"""Anchor-based clustering of raw findings that describe the same issue."""

from __future__ import annotations

import re
from collections.abc import Iterable

from corroborate.constants.aggregation import (
    DEFAULT_FUZZY_LINE_MATCHING,
    MIN_RULE_TOKEN_OVERLAP,
    SECURITY_EQUIVALENT_CATEGORIES,
    SEVERITY_MATCH_LINE_WINDOW,
)
from corroborate.constants.tools import TOOL_DEPENDENCY
from corroborate.model import Finding, FindingGroup

_RULE_TOKEN_SPLIT = re.compile(r"[-_]")


def rule_tokens(rule_id: str | None) -> frozenset[str]:
    """Lower-cased ``-``/``_`` delimited tokens of a rule id."""
    if not rule_id:
        return frozenset()
    return frozenset(token for token in _RULE_TOKEN_SPLIT.split(rule_id.lower()) if token)


def categories_match(a: Finding, b: Finding) -> bool:
    """Whether two findings point at the same class of problem."""
    if a.category == b.category:
        return True
    if a.category in SECURITY_EQUIVALENT_CATEGORIES and b.category in SECURITY_EQUIVALENT_CATEGORIES:
        return True
    if a.owasp and a.owasp == b.owasp_category:
        return True
    if b.owasp and b.owasp == a.owasp_category:
        return True
    if a.rule_id and b.rule_id:
        return len(rule_tokens(a.rule_id) & rule_tokens(b.rule_id)) >= MIN_RULE_TOKEN_OVERLAP
    return False


def are_related(a: Finding, b: Finding, *, fuzzy_line_matching: int = DEFAULT_FUZZY_LINE_MATCHING) -> bool:
    """Pairwise relation used by the grouper.

    Dependency findings relate purely by package name; line distance is
    ignored for them. Everything else must share a file and sit within the
    fuzzy window, then match on category or on severity at close range.
    """
    if a.file_path != b.file_path:
        return False

    if a.tool == TOOL_DEPENDENCY and b.tool == TOOL_DEPENDENCY:
        return a.package_name is not None and a.package_name == b.package_name

    distance = abs(a.line - b.line)
    if distance > fuzzy_line_matching:
        return False

    if categories_match(a, b):
        return True
    return a.severity == b.severity and distance <= SEVERITY_MATCH_LINE_WINDOW


def group_findings(
    findings: Iterable[Finding],
    *,
    fuzzy_line_matching: int = DEFAULT_FUZZY_LINE_MATCHING,
) -> list[FindingGroup]:
    """Greedy single-pass clustering.

    Each unclustered finding becomes an anchor and absorbs every later
    unclustered finding related to it. Membership is tested against the
    anchor only, so the result is not a transitive closure.
    """
    pending = list(findings)
    used = [False] * len(pending)
    groups: list[FindingGroup] = []

    for i, anchor in enumerate(pending):
        if used[i]:
            continue
        used[i] = True
        members = [anchor]
        for j in range(i + 1, len(pending)):
            if used[j]:
                continue
            if are_related(anchor, pending[j], fuzzy_line_matching=fuzzy_line_matching):
                used[j] = True
                members.append(pending[j])
        groups.append(FindingGroup(members=tuple(members)))

    return groups
