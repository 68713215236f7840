"""Constants for changeset preparation."""

from __future__ import annotations

import re

REMOVED_FILE_STATUS: str = "removed"

DEPENDENCY_MANIFEST_PATTERN: re.Pattern[str] = re.compile(
    r"(?:package\.json|package-lock\.json|yarn\.lock|requirements\.txt|Pipfile|Pipfile\.lock"
    r"|pyproject\.toml|Gemfile|Gemfile\.lock|composer\.json|Cargo\.toml|Cargo\.lock|go\.mod)$",
    re.IGNORECASE,
)

FINGERPRINT_HEX_LENGTH: int = 16
