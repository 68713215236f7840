"""Structured validation error model for ``corroborate.yaml`` checks."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationError:
    """A single config problem with a stable code and the offending field."""

    code: str
    path: str
    field: str
    message: str
    hint: str = ""

    def format(self) -> str:
        """Render as ``[CODE] path field: message (hint)``."""
        location = f"{self.path} {self.field}" if self.field else self.path
        line = f"[{self.code}] {location}: {self.message}"
        return f"{line} ({self.hint})" if self.hint else line

    def to_dict(self) -> dict[str, str]:
        """Serialize for machine-readable CLI output."""
        return {
            "code": self.code,
            "path": self.path,
            "field": self.field,
            "message": self.message,
            "hint": self.hint,
        }


def sort_errors(errors: list[ValidationError]) -> list[ValidationError]:
    """Order errors by code, then field, so output is stable across runs."""
    return sorted(errors, key=lambda error: (error.code, error.path, error.field))


def format_errors(errors: list[ValidationError]) -> str:
    """Join formatted errors one per line."""
    return "\n".join(error.format() for error in sort_errors(errors))
