"""Post-aggregation score adjustments: adaptive learning and custom rules."""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from corroborate.aggregation.confidence import round2
from corroborate.config.model import CorroborateConfig
from corroborate.constants.config import MAX_ADAPTIVE_STEPS, MIN_ADAPTIVE_CONFIDENCE
from corroborate.model import AggregatedFinding
from corroborate.types import FindingActionKind
from corroborate.types.config import AdaptiveConfig

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class FindingAction:
    """A reviewer's dismiss/resolve decision on one finding."""

    fingerprint: str
    rule_id: str
    repo_id: str
    action: FindingActionKind
    file_path: str | None = None
    message: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ActionStats:
    total_actions: int
    dismissed: int
    resolved: int
    top_dismissed_rules: dict[str, int]


class FindingActionLog:
    """In-memory record of reviewer actions, queried by rule and repository."""

    def __init__(self, actions: Iterable[FindingAction] = ()) -> None:
        self._actions: list[FindingAction] = list(actions)

    def __len__(self) -> int:
        return len(self._actions)

    def record(self, action: FindingAction) -> None:
        self._actions.append(action)

    def record_for(self, finding: AggregatedFinding, *, repo_id: str, action: FindingActionKind) -> FindingAction:
        """Record an action taken on an aggregated finding and return it."""
        entry = FindingAction(
            fingerprint=finding.fingerprint,
            rule_id=finding.rule_id or "",
            repo_id=repo_id,
            action=action,
            file_path=finding.file_path,
            message=finding.message,
        )
        self.record(entry)
        return entry

    def dismissal_count(self, rule_id: str, repo_id: str) -> int:
        return sum(
            1
            for entry in self._actions
            if entry.rule_id == rule_id and entry.repo_id == repo_id and entry.action == "dismissed"
        )

    def prune(self, max_age_days: int, *, now: datetime | None = None) -> int:
        """Drop actions older than ``max_age_days``; returns how many were removed."""
        cutoff = (now or _utcnow()) - timedelta(days=max_age_days)
        kept = [entry for entry in self._actions if entry.timestamp > cutoff]
        removed = len(self._actions) - len(kept)
        self._actions = kept
        if removed:
            logger.info("Pruned %d finding actions older than %d days", removed, max_age_days)
        return removed

    def stats(self, repo_id: str) -> ActionStats:
        entries = [entry for entry in self._actions if entry.repo_id == repo_id]
        dismissed = Counter(entry.rule_id for entry in entries if entry.action == "dismissed")
        return ActionStats(
            total_actions=len(entries),
            dismissed=sum(dismissed.values()),
            resolved=sum(1 for entry in entries if entry.action == "resolved"),
            top_dismissed_rules=dict(dismissed.most_common()),
        )


class AdaptiveScorer:
    """Lower confidence for rules that reviewers keep dismissing in a repository.

    Every ``dismissal_threshold`` dismissals take another
    ``confidence_reduction`` off, for at most three steps, and confidence
    never drops below 0.1.
    """

    def __init__(self, log: FindingActionLog, config: AdaptiveConfig | None = None) -> None:
        self.log = log
        self.config = config or AdaptiveConfig()

    def adjustment(self, rule_id: str, repo_id: str) -> float:
        dismissals = self.log.dismissal_count(rule_id, repo_id)
        if dismissals < self.config.dismissal_threshold:
            return 0.0
        steps = min(dismissals // self.config.dismissal_threshold, MAX_ADAPTIVE_STEPS)
        return -round2(self.config.confidence_reduction * steps)

    def apply(self, findings: Sequence[AggregatedFinding], repo_id: str | None) -> list[AggregatedFinding]:
        if not findings or not repo_id:
            return list(findings)

        adjustments: dict[str, float] = {}
        for rule_id in dict.fromkeys(finding.rule_id for finding in findings if finding.rule_id):
            delta = self.adjustment(rule_id, repo_id)
            if delta:
                adjustments[rule_id] = delta
        if not adjustments:
            return list(findings)

        adjusted: list[AggregatedFinding] = []
        for finding in findings:
            delta = adjustments.get(finding.rule_id or "")
            if delta is None:
                adjusted.append(finding)
                continue
            adjusted.append(
                replace(
                    finding,
                    confidence=round2(max(MIN_ADAPTIVE_CONFIDENCE, finding.confidence + delta)),
                    adaptive_adjustment=delta,
                    original_confidence=finding.confidence,
                )
            )
        logger.debug("Adaptive scoring adjusted %d rule(s) for %s", len(adjustments), repo_id)
        return adjusted


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    parts = pattern.split("**")
    translated = ".*".join("[^/]*".join(re.escape(piece) for piece in part.split("*")) for part in parts)
    return re.compile(translated)


def match_glob(file_path: str, pattern: str) -> bool:
    """Glob match where ``**`` crosses directories and ``*`` does not.

    A pattern also matches when it occurs anywhere inside the path, so
    ``vendor/**`` ignores nested vendor directories too.
    """
    regex = _glob_regex(pattern)
    return regex.fullmatch(file_path) is not None or regex.search(file_path) is not None


def apply_ignore_patterns(findings: Iterable[AggregatedFinding], config: CorroborateConfig) -> list[AggregatedFinding]:
    ignored_rules = set(config.ignore.rules)
    kept: list[AggregatedFinding] = []
    for finding in findings:
        if finding.rule_id is not None and finding.rule_id in ignored_rules:
            continue
        if finding.file_path and any(match_glob(finding.file_path, pattern) for pattern in config.ignore.files):
            continue
        kept.append(finding)
    return kept


def apply_severity_overrides(
    findings: Iterable[AggregatedFinding],
    config: CorroborateConfig,
) -> list[AggregatedFinding]:
    overrides = config.severity_overrides
    result: list[AggregatedFinding] = []
    for finding in findings:
        override = overrides.get(finding.rule_id) if finding.rule_id else None
        if override is None:
            result.append(finding)
        else:
            result.append(
                replace(finding, finding=replace(finding.finding, severity=override), severity_overridden=True)
            )
    return result


def apply_custom_rules(findings: Sequence[AggregatedFinding], config: CorroborateConfig) -> list[AggregatedFinding]:
    """Drop ignored findings, then apply per-rule severity overrides."""
    if not config.has_custom_rules:
        return list(findings)
    kept = apply_ignore_patterns(findings, config)
    if len(kept) != len(findings):
        logger.debug("Custom rules ignored %d finding(s)", len(findings) - len(kept))
    return apply_severity_overrides(kept, config)
