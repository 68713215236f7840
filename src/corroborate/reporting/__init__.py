"""Noise reduction and prompt rendering for aggregated findings."""

from __future__ import annotations

from corroborate.reporting.filters import (
    NoiseFilters,
    NoiseReduction,
    apply_noise_reduction,
    apply_severity_threshold,
    cap_findings_per_file,
    group_related_findings,
)
from corroborate.reporting.prompt import format_findings_for_prompt

__all__ = [
    "NoiseFilters",
    "NoiseReduction",
    "apply_noise_reduction",
    "apply_severity_threshold",
    "cap_findings_per_file",
    "format_findings_for_prompt",
    "group_related_findings",
]
