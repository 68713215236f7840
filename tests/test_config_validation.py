"""Tests for config validation (error codes, messages, ordering)."""

from __future__ import annotations

from pathlib import Path

from corroborate.config import validate_config_file
from corroborate.config.validator import _suggest_key
from corroborate.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    CFG008,
    CFG009,
)
from corroborate.exceptions.validation import ValidationError, format_errors, sort_errors


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "corroborate.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def _codes(errors: list[ValidationError]) -> list[str]:
    return [error.code for error in errors]


def test_missing_default_config_is_fine(tmp_path: Path) -> None:
    assert validate_config_file(tmp_path) == []


def test_missing_explicit_config(tmp_path: Path) -> None:
    errors = validate_config_file(tmp_path, tmp_path / "missing.yaml", config_explicit=True)

    assert _codes(errors) == [CFG001]


def test_invalid_yaml(tmp_path: Path) -> None:
    _write(tmp_path, "a: [\n")

    assert _codes(validate_config_file(tmp_path)) == [CFG002]


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    _write(tmp_path, "- 1\n")

    errors = validate_config_file(tmp_path)

    assert _codes(errors) == [CFG003]
    assert "list" in errors[0].message


def test_valid_config_has_no_errors(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "tool_weights:\n  eslint: 0.3\n"
        "correlation_bonuses:\n  two_tools: 0.1\n"
        "min_confidence_threshold: 0.5\n"
        "severity_threshold: medium\n"
        "ignore:\n  files: ['dist/**']\n  rules: [no-console]\n"
        "severity_overrides:\n  no-eval: critical\n"
        "adaptive:\n  dismissal_threshold: 4\n  confidence_reduction: 0.1\n",
    )

    assert validate_config_file(tmp_path) == []


def test_unknown_key_suggests_closest_match(tmp_path: Path) -> None:
    _write(tmp_path, "min_confidence_treshold: 0.5\n")

    (error,) = validate_config_file(tmp_path)

    assert error.code == CFG004
    assert error.field == "min_confidence_treshold"
    assert "min_confidence_threshold" in error.hint


def test_suggest_key_without_close_match() -> None:
    assert _suggest_key("zzzz", ALLOWED_CONFIG_KEYS) == ""


def test_type_and_range_errors(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "enable_correlation: 'yes'\n"
        "min_confidence_threshold: 2\n"
        "max_findings_per_file: 0\n"
        "fuzzy_line_matching: 1.5\n",
    )

    errors = validate_config_file(tmp_path)

    assert sorted((error.code, error.field) for error in errors) == [
        (CFG005, "enable_correlation"),
        (CFG005, "fuzzy_line_matching"),
        (CFG007, "max_findings_per_file"),
        (CFG007, "min_confidence_threshold"),
    ]


def test_enum_errors(tmp_path: Path) -> None:
    _write(tmp_path, "severity_threshold: urgent\nseverity_overrides:\n  no-eval: blocker\n")

    errors = validate_config_file(tmp_path)

    assert sorted(error.field for error in errors if error.code == CFG006) == [
        "severity_overrides.no-eval",
        "severity_threshold",
    ]


def test_nested_blocks(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "tool_weights: 0.5\n"
        "correlation_bonuses:\n  four_tools: 0.3\n"
        "ignore:\n  paths: []\n  rules: no-console\n",
    )

    errors = validate_config_file(tmp_path)

    assert (CFG009, "tool_weights") in {(error.code, error.field) for error in errors}
    assert (CFG004, "correlation_bonuses.four_tools") in {(error.code, error.field) for error in errors}
    assert (CFG004, "ignore.paths") in {(error.code, error.field) for error in errors}
    assert (CFG005, "ignore.rules") in {(error.code, error.field) for error in errors}


def test_rule_both_ignored_and_overridden(tmp_path: Path) -> None:
    _write(tmp_path, "ignore:\n  rules: [no-eval]\nseverity_overrides:\n  no-eval: low\n")

    (error,) = validate_config_file(tmp_path)

    assert error.code == CFG008
    assert "no-eval" in error.message


def test_errors_sort_and_format_stably() -> None:
    errors = [
        ValidationError(code=CFG007, path="c.yaml", field="b", message="second"),
        ValidationError(code=CFG004, path="c.yaml", field="a", message="first", hint="did you mean `x`?"),
    ]

    assert [error.code for error in sort_errors(errors)] == [CFG004, CFG007]
    assert format_errors(errors) == "[CFG004] c.yaml a: first (did you mean `x`?)\n[CFG007] c.yaml b: second"
