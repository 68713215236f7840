"""Detector interfaces consumed by the orchestrator."""

from __future__ import annotations

import inspect
import re
from abc import ABC, abstractmethod
from typing import ClassVar

from corroborate.model import Changeset, DetectorReport, Finding

_TOOL_NAME_PATTERN: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9_]*$")


def _validate_tool_name(cls: type) -> None:
    if inspect.isabstract(cls):
        return
    tool = getattr(cls, "tool", None)
    if not isinstance(tool, str) or not tool.strip():
        raise TypeError(f"{cls.__name__} must define a non-empty class attribute `tool`")
    if not _TOOL_NAME_PATTERN.match(tool):
        raise TypeError(f"{cls.__name__}.tool must be lower_snake_case (got {tool!r})")


class Detector(ABC):
    """Per-file detector: one call per changed file."""

    tool: ClassVar[str]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        _validate_tool_name(cls)

    def applies_to(self, file_path: str) -> bool:
        """Whether this detector should run on ``file_path``; defaults to every file."""
        return True

    @abstractmethod
    async def analyze(self, *, code: str, file_path: str) -> DetectorReport:
        """Analyze one file's (added) source text."""


class ChangesetDetector(ABC):
    """Detector that looks at the whole changeset at once.

    Secret scanners, end-of-life checks and import-graph checks live here.
    They receive the per-file findings collected so far, so a checker can
    build on dependency findings.
    """

    tool: ClassVar[str]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        _validate_tool_name(cls)

    @abstractmethod
    async def analyze_changeset(self, changeset: Changeset, *, findings: tuple[Finding, ...]) -> DetectorReport:
        """Analyze the full changeset."""
