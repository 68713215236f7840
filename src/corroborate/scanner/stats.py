"""Running analysis statistics, kept apart from the orchestrator."""

from __future__ import annotations

from corroborate.model import AnalysisStats


class StatsAccumulator:
    """Accumulates ``AnalysisStats`` snapshots across runs.

    Each analysis returns its own immutable snapshot; this object only sums
    them. ``reset`` returns the accumulator to its initial state.
    """

    def __init__(self) -> None:
        self._analyses = 0
        self._totals = AnalysisStats()

    def record(self, stats: AnalysisStats) -> None:
        totals = self._totals
        self._analyses += 1
        self._totals = AnalysisStats(
            files_analyzed=totals.files_analyzed + stats.files_analyzed,
            raw_findings=totals.raw_findings + stats.raw_findings,
            findings=totals.findings + stats.findings,
            detector_runs=totals.detector_runs + stats.detector_runs,
            detector_failures=totals.detector_failures + stats.detector_failures,
            duration_seconds=totals.duration_seconds + stats.duration_seconds,
        )

    @property
    def analyses(self) -> int:
        return self._analyses

    @property
    def average_duration_seconds(self) -> float:
        return self._totals.duration_seconds / self._analyses if self._analyses else 0.0

    def snapshot(self) -> AnalysisStats:
        """Totals across every recorded run."""
        return self._totals

    def reset(self) -> None:
        self._analyses = 0
        self._totals = AnalysisStats()
