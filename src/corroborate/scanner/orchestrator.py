"""End-to-end analysis orchestration for Corroborate.

``analyze_changeset`` is the primary entry point. ``analyze_file`` and
``analyze_findings`` cover single files and pre-collected findings; all
three share one finalization pipeline.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from corroborate.aggregation import (
    ConfidenceAggregator,
    build_changeset_summary,
    build_correlation_report,
    build_summary,
    sort_aggregated,
)
from corroborate.config.model import CorroborateConfig
from corroborate.detectors import ChangesetDetector, Detector
from corroborate.model import (
    AggregatedFinding,
    AnalysisResult,
    AnalysisStats,
    Changeset,
    DetectorError,
    FileAnalysis,
    Finding,
    PrContext,
    finding_from_payload,
    validate_finding,
)
from corroborate.reporting.filters import NoiseFilters, apply_noise_reduction, apply_severity_threshold
from corroborate.scanner.pipeline.adjustments import AdaptiveScorer, FindingActionLog, apply_custom_rules
from corroborate.scanner.pipeline.changeset import AnalysisTarget, prepare_files
from corroborate.scanner.pipeline.dispatch import (
    DetectorOutcome,
    collect_errors,
    collect_findings,
    run_changeset_detectors,
    run_file_detectors,
)
from corroborate.scanner.recommendation import recommend
from corroborate.scanner.score import score_risk
from corroborate.scanner.stats import StatsAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisContext:
    """Optional collaborators applied after aggregation."""

    repo_id: str | None = None
    action_log: FindingActionLog | None = None
    llm_findings: tuple[Finding | Mapping[str, object], ...] = ()
    stats: StatsAccumulator | None = field(default=None, compare=False)


def _file_analysis(
    file_path: str,
    kept: Sequence[AggregatedFinding],
    raw: Sequence[Finding],
    errors: Sequence[DetectorError],
    config: CorroborateConfig,
) -> FileAnalysis:
    shown = apply_severity_threshold(kept, config.severity_threshold)
    truncated = len(shown) > config.max_findings_per_file
    return FileAnalysis(
        file_path=file_path,
        findings=tuple(shown[: config.max_findings_per_file]),
        summary=build_summary(kept, raw),
        risk_score=score_risk(kept),
        truncated=truncated,
        original_count=len(shown) if truncated else None,
        detector_errors=tuple(errors),
    )


def _finalize(
    raw: Sequence[Finding],
    *,
    config: CorroborateConfig,
    file_paths: Sequence[str],
    outcomes: Sequence[DetectorOutcome],
    context: AnalysisContext,
    started_at: float,
    pr_context: PrContext | None = None,
) -> AnalysisResult:
    aggregator = ConfidenceAggregator(config.aggregation)
    groups = aggregator.group(raw)
    aggregated = aggregator.aggregate_groups(groups)

    if context.llm_findings:
        aggregated = aggregator.apply_llm_corroboration(aggregated, context.llm_findings)
    if context.action_log is not None and context.repo_id:
        aggregated = AdaptiveScorer(context.action_log, config.adaptive).apply(aggregated, context.repo_id)
    aggregated = apply_custom_rules(aggregated, config)

    kept = sort_aggregated(aggregator.filter_by_confidence(aggregated))
    risk_score = score_risk(kept)
    noise = apply_noise_reduction(kept, NoiseFilters.from_config(config))

    errors = collect_errors(outcomes)
    paths = list(dict.fromkeys([*file_paths, *(finding.file_path for finding in kept)]))
    files = tuple(
        _file_analysis(
            path,
            [finding for finding in kept if finding.file_path == path],
            [finding for finding in raw if finding.file_path == path],
            [error for error in errors if error.file_path == path],
            config,
        )
        for path in paths
    )

    summary = build_changeset_summary(
        kept,
        raw,
        files_analyzed=len(file_paths),
        per_file_counts={analysis.file_path: analysis.summary.total for analysis in files},
    )
    stats = AnalysisStats(
        files_analyzed=len(file_paths),
        raw_findings=len(raw),
        findings=len(kept),
        detector_runs=len(outcomes),
        detector_failures=len(errors),
        duration_seconds=time.perf_counter() - started_at,
    )
    if context.stats is not None:
        context.stats.record(stats)

    logger.info(
        "Analyzed %d file(s): %d raw finding(s), %d aggregated, risk %d (%s)",
        stats.files_analyzed,
        stats.raw_findings,
        stats.findings,
        risk_score.score,
        risk_score.level,
    )

    return AnalysisResult(
        findings=noise.findings,
        summary=summary,
        risk_score=risk_score,
        recommendation=recommend(summary.findings, risk_score),
        unfiltered_count=len(aggregated),
        display_groups=noise.display_groups,
        truncated=noise.truncated,
        original_count=noise.original_count,
        files=files,
        correlation=build_correlation_report(groups),
        detector_errors=tuple(errors),
        stats=stats,
        pr_context=pr_context,
    )


async def analyze_file(
    code: str,
    file_path: str,
    detectors: Sequence[Detector],
    *,
    config: CorroborateConfig | None = None,
    context: AnalysisContext | None = None,
) -> AnalysisResult:
    """Run every applicable detector on one file and aggregate the results."""
    started_at = time.perf_counter()
    config = config or CorroborateConfig()
    context = context or AnalysisContext()

    outcome_lists = await run_file_detectors(
        [AnalysisTarget(file_path=file_path, code=code)],
        detectors,
        parallel=config.parallel_analysis,
    )
    outcomes = [outcome for per_target in outcome_lists for outcome in per_target]
    return _finalize(
        collect_findings(outcomes),
        config=config,
        file_paths=[file_path],
        outcomes=outcomes,
        context=context,
        started_at=started_at,
    )


async def analyze_changeset(
    changeset: Changeset | Mapping[str, object],
    detectors: Sequence[Detector] = (),
    changeset_detectors: Sequence[ChangesetDetector] = (),
    *,
    config: CorroborateConfig | None = None,
    context: AnalysisContext | None = None,
) -> AnalysisResult:
    """Analyze a changeset: per-file detectors, then changeset-wide detectors.

    Detector failures never abort the run; they are reported in
    ``detector_errors`` and contribute no findings.
    """
    started_at = time.perf_counter()
    config = config or CorroborateConfig()
    context = context or AnalysisContext()
    if not isinstance(changeset, Changeset):
        changeset = Changeset.from_dict(changeset)

    targets = prepare_files(changeset)
    logger.info("Analyzing changeset with %d file(s), %d to scan", len(changeset.files), len(targets))

    outcome_lists = await run_file_detectors(targets, detectors, parallel=config.parallel_analysis)
    file_outcomes = [outcome for per_target in outcome_lists for outcome in per_target]
    per_file = collect_findings(file_outcomes)

    changeset_outcomes = await run_changeset_detectors(
        changeset,
        changeset_detectors,
        tuple(per_file),
        parallel=config.parallel_analysis,
    )
    outcomes = [*file_outcomes, *changeset_outcomes]

    return _finalize(
        [*per_file, *collect_findings(changeset_outcomes)],
        config=config,
        file_paths=[target.file_path for target in targets],
        outcomes=outcomes,
        context=context,
        started_at=started_at,
        pr_context=PrContext(
            title=changeset.title,
            author=changeset.author,
            files_changed=len(changeset.files),
            additions=changeset.additions,
            deletions=changeset.deletions,
        ),
    )


def analyze_findings(
    findings: Iterable[Finding | Mapping[str, object]],
    *,
    config: CorroborateConfig | None = None,
    context: AnalysisContext | None = None,
) -> AnalysisResult:
    """Aggregate findings that were collected elsewhere.

    Mappings are normalized first; malformed entries are skipped with a
    warning.
    """
    started_at = time.perf_counter()
    config = config or CorroborateConfig()
    context = context or AnalysisContext()

    raw: list[Finding] = []
    for item in findings:
        finding = validate_finding(item) if isinstance(item, Finding) else finding_from_payload(item)
        if finding is not None:
            raw.append(finding)

    return _finalize(
        raw,
        config=config,
        file_paths=list(dict.fromkeys(finding.file_path for finding in raw)),
        outcomes=(),
        context=context,
        started_at=started_at,
    )
