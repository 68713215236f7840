"""Detector interfaces."""

from __future__ import annotations

from corroborate.detectors.base import ChangesetDetector, Detector

__all__ = ["ChangesetDetector", "Detector"]
