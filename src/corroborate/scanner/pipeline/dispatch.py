"""Concurrent detector dispatch with per-detector failure isolation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import TypeAlias

from corroborate.detectors import ChangesetDetector, Detector
from corroborate.model import (
    Changeset,
    DetectorError,
    DetectorReport,
    Finding,
    finding_from_payload,
    validate_finding,
)
from corroborate.scanner.pipeline.changeset import AnalysisTarget
from corroborate.types import DetectorName, JsonObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorSuccess:
    """A detector run that returned (possibly zero) findings."""

    tool: DetectorName
    file_path: str | None
    findings: tuple[Finding, ...]
    summary: JsonObject


@dataclass(frozen=True)
class DetectorFailure:
    """A detector run that raised; it contributes no findings."""

    tool: DetectorName
    file_path: str | None
    error: str

    def to_error(self) -> DetectorError:
        return DetectorError(tool=self.tool, file_path=self.file_path, error=self.error)


DetectorOutcome: TypeAlias = DetectorSuccess | DetectorFailure


def normalize_report(
    report: object,
    *,
    tool: DetectorName,
    file_path: str | None,
    stamp_tool: bool,
) -> tuple[tuple[Finding, ...], JsonObject]:
    """Extract valid findings and the summary from whatever a detector returned.

    Per-file detectors get their ``tool`` stamped onto every finding and the
    analyzed path filled in where a finding has none.
    """
    if report is None:
        return (), {}
    if isinstance(report, DetectorReport):
        items, summary = report.findings, report.summary
    elif isinstance(report, Mapping):
        raw_items = report.get("findings")
        items = tuple(raw_items) if isinstance(raw_items, (list, tuple)) else ()
        raw_summary = report.get("summary")
        summary = dict(raw_summary) if isinstance(raw_summary, Mapping) else {}
    else:
        logger.warning("Detector %s returned unsupported report type %s", tool, type(report).__name__)
        return (), {}

    findings: list[Finding] = []
    for item in items:
        if isinstance(item, Finding):
            stamped = replace(item, tool=tool) if stamp_tool and item.tool != tool else item
            finding: Finding | None = validate_finding(stamped)
        else:
            payload = {**item, "tool": tool} if stamp_tool and isinstance(item, Mapping) else item
            finding = finding_from_payload(payload, default_tool=tool, default_file_path=file_path)
        if finding is None:
            continue
        if stamp_tool and finding.tool != tool:
            finding = replace(finding, tool=tool)
        findings.append(finding)
    return tuple(findings), summary


async def run_file_detector(detector: Detector, target: AnalysisTarget) -> DetectorOutcome | None:
    """Run one detector on one file; ``None`` when the detector does not apply."""
    try:
        if not detector.applies_to(target.file_path):
            return None
        report = await detector.analyze(code=target.code, file_path=target.file_path)
        findings, summary = normalize_report(
            report,
            tool=detector.tool,
            file_path=target.file_path,
            stamp_tool=True,
        )
    except Exception as exc:
        logger.warning("Detector %s failed on %s: %s", detector.tool, target.file_path, exc)
        return DetectorFailure(tool=detector.tool, file_path=target.file_path, error=str(exc) or type(exc).__name__)
    return DetectorSuccess(tool=detector.tool, file_path=target.file_path, findings=findings, summary=summary)


async def _run_file(
    target: AnalysisTarget,
    detectors: Sequence[Detector],
    *,
    parallel: bool,
) -> list[DetectorOutcome]:
    if parallel:
        results = await asyncio.gather(*(run_file_detector(detector, target) for detector in detectors))
    else:
        results = [await run_file_detector(detector, target) for detector in detectors]
    return [outcome for outcome in results if outcome is not None]


async def run_file_detectors(
    targets: Sequence[AnalysisTarget],
    detectors: Sequence[Detector],
    *,
    parallel: bool = True,
) -> list[list[DetectorOutcome]]:
    """Fan every target out to every applicable detector.

    Returns one outcome list per target, in target order, regardless of
    whether the runs were concurrent or sequential.
    """
    if parallel:
        return list(await asyncio.gather(*(_run_file(target, detectors, parallel=True) for target in targets)))
    return [await _run_file(target, detectors, parallel=False) for target in targets]


async def run_changeset_detector(
    detector: ChangesetDetector,
    changeset: Changeset,
    findings: tuple[Finding, ...],
) -> DetectorOutcome:
    try:
        report = await detector.analyze_changeset(changeset, findings=findings)
        collected, summary = normalize_report(report, tool=detector.tool, file_path=None, stamp_tool=False)
    except Exception as exc:
        logger.warning("Changeset detector %s failed: %s", detector.tool, exc)
        return DetectorFailure(tool=detector.tool, file_path=None, error=str(exc) or type(exc).__name__)
    return DetectorSuccess(tool=detector.tool, file_path=None, findings=collected, summary=summary)


async def run_changeset_detectors(
    changeset: Changeset,
    detectors: Sequence[ChangesetDetector],
    findings: tuple[Finding, ...],
    *,
    parallel: bool = True,
) -> list[DetectorOutcome]:
    """Run changeset-wide detectors over the full file set."""
    if parallel:
        return list(await asyncio.gather(*(run_changeset_detector(d, changeset, findings) for d in detectors)))
    return [await run_changeset_detector(detector, changeset, findings) for detector in detectors]


def collect_findings(outcomes: Sequence[DetectorOutcome]) -> list[Finding]:
    """Findings of all successful outcomes, in outcome order."""
    collected: list[Finding] = []
    for outcome in outcomes:
        if isinstance(outcome, DetectorSuccess):
            collected.extend(outcome.findings)
    return collected


def collect_errors(outcomes: Sequence[DetectorOutcome]) -> list[DetectorError]:
    return [outcome.to_error() for outcome in outcomes if isinstance(outcome, DetectorFailure)]
