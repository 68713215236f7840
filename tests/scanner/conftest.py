"""Scripted detectors for orchestration tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence

import pytest

from corroborate.detectors import ChangesetDetector, Detector
from corroborate.model import Changeset, DetectorReport, Finding
from corroborate.types import JsonObject


class ScriptedDetector(Detector):
    """Returns canned findings (or raises) and records every call."""

    tool = "scripted"

    def __init__(
        self,
        findings: Sequence[Finding | JsonObject] = (),
        *,
        error: Exception | None = None,
        extensions: tuple[str, ...] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.findings = tuple(findings)
        self.error = error
        self.extensions = extensions
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    def applies_to(self, file_path: str) -> bool:
        return self.extensions is None or file_path.endswith(self.extensions)

    async def analyze(self, *, code: str, file_path: str) -> DetectorReport:
        self.calls.append((file_path, code))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return DetectorReport(findings=self.findings, summary={"count": len(self.findings)})


class ScriptedChangesetDetector(ChangesetDetector):
    tool = "scripted_changeset"

    def __init__(self, findings: Sequence[Finding | JsonObject] = (), *, error: Exception | None = None) -> None:
        self.findings = tuple(findings)
        self.error = error
        self.seen: list[tuple[Finding, ...]] = []

    async def analyze_changeset(self, changeset: Changeset, *, findings: tuple[Finding, ...]) -> DetectorReport:
        self.seen.append(findings)
        if self.error is not None:
            raise self.error
        return DetectorReport(findings=self.findings)


def _scripted(base: type, tool: str) -> type:
    return type(f"{tool.title().replace('_', '')}Detector", (base,), {"tool": tool})


@pytest.fixture()
def make_detector() -> Callable[..., ScriptedDetector]:
    """Build a per-file detector reporting under ``tool``."""

    def _make(tool: str, findings: Sequence[Finding | JsonObject] = (), **kwargs: object) -> ScriptedDetector:
        return _scripted(ScriptedDetector, tool)(findings, **kwargs)

    return _make


@pytest.fixture()
def make_changeset_detector() -> Callable[..., ScriptedChangesetDetector]:
    def _make(tool: str, findings: Sequence[Finding | JsonObject] = (), **kwargs: object) -> ScriptedChangesetDetector:
        return _scripted(ScriptedChangesetDetector, tool)(findings, **kwargs)

    return _make
