"""Turn a changeset descriptor into per-file analysis targets."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from corroborate.constants.changeset import DEPENDENCY_MANIFEST_PATTERN, REMOVED_FILE_STATUS
from corroborate.model import Changeset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisTarget:
    """Source text handed to per-file detectors."""

    file_path: str
    code: str


def extract_added_code(patch: str | None) -> str:
    """Keep only added lines of a unified diff, without their ``+`` marker."""
    if not patch:
        return ""
    return "\n".join(line[1:] for line in patch.split("\n") if line.startswith("+") and not line.startswith("++"))


def is_dependency_manifest(file_path: str | None) -> bool:
    if not file_path:
        return False
    return DEPENDENCY_MANIFEST_PATTERN.search(file_path) is not None


def prepare_files(changeset: Changeset) -> list[AnalysisTarget]:
    """Select what each changed file contributes to per-file analysis.

    Removed files are skipped. Dependency manifests with full content are
    analyzed once, by that content. Other files contribute their added
    lines, or their content when no patch is available. Files whose text
    is blank are skipped.
    """
    targets: list[AnalysisTarget] = []
    for changed in changeset.files:
        if changed.status == REMOVED_FILE_STATUS:
            logger.debug("Skipping removed file %s", changed.filename)
            continue

        if is_dependency_manifest(changed.filename) and changed.content:
            code = changed.content
        elif changed.patch:
            code = extract_added_code(changed.patch)
        else:
            code = changed.content or ""

        if not code.strip():
            logger.debug("Skipping %s: no added code", changed.filename)
            continue
        targets.append(AnalysisTarget(file_path=changed.filename, code=code))
    return targets
