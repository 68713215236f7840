"""Changeset descriptors handed to the orchestrator by a PR provider."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


def _as_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def _as_optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class ChangedFile:
    """One file in a changeset; ``patch`` is a unified diff hunk set."""

    filename: str
    status: str = "modified"
    patch: str | None = None
    content: str | None = None
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> ChangedFile:
        """Build from a provider payload; accepts ``path`` as an alias of ``filename``."""
        filename = payload.get("filename", payload.get("path", ""))
        status = payload.get("status")
        return cls(
            filename=str(filename),
            status=status if isinstance(status, str) else "modified",
            patch=_as_optional_str(payload.get("patch")),
            content=_as_optional_str(payload.get("content")),
            additions=_as_int(payload.get("additions")),
            deletions=_as_int(payload.get("deletions")),
        )


@dataclass(frozen=True)
class Changeset:
    """A PR/changeset: changed files plus descriptive metadata."""

    files: tuple[ChangedFile, ...] = ()
    title: str = ""
    author: str | None = None
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> Changeset:
        """Build from ``{files, title, author, stats}``; unknown entries are ignored."""
        raw_files = payload.get("files")
        files = tuple(
            ChangedFile.from_dict(item) for item in (raw_files if isinstance(raw_files, list) else [])
            if isinstance(item, Mapping)
        )
        author = payload.get("author")
        if isinstance(author, Mapping):
            author = author.get("login")
        stats = payload.get("stats")
        stats = stats if isinstance(stats, Mapping) else {}
        title = payload.get("title")
        return cls(
            files=files,
            title=title if isinstance(title, str) else "",
            author=_as_optional_str(author),
            additions=_as_int(stats.get("additions")),
            deletions=_as_int(stats.get("deletions")),
        )
