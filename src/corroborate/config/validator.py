"""Config file validation for Corroborate."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import yaml

from corroborate.constants.config import (
    ADAPTIVE_KEYS,
    CONFIG_FILENAME,
    CORRELATION_BONUS_KEYS,
    IGNORE_KEYS,
    VALID_SEVERITIES,
    VALID_SEVERITY_THRESHOLDS,
)
from corroborate.constants.validation import (
    ALLOWED_CONFIG_KEYS,
    BOOLEAN_KEYS,
    CFG001,
    CFG002,
    CFG003,
    CFG004,
    CFG005,
    CFG006,
    CFG007,
    CFG008,
    CFG009,
    NON_NEGATIVE_INT_KEYS,
    POSITIVE_INT_KEYS,
    UNIT_INTERVAL_KEYS,
)
from corroborate.exceptions.validation import ValidationError


def validate_config_file(
    root: Path,
    config_path: Path | None = None,
    *,
    config_explicit: bool = False,
) -> list[ValidationError]:
    """Validate a corroborate.yaml file and return every problem found.

    Unlike ``load_config`` this never raises; the CLI uses it to report all
    problems at once before any analysis runs.
    """
    errors: list[ValidationError] = []
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    path_str = str(path)

    if not path.exists():
        if config_explicit:
            errors.append(ValidationError(code=CFG001, path=path_str, field="", message=f"config file not found: {path}"))
        return errors

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        errors.append(ValidationError(code=CFG002, path=path_str, field="", message=f"invalid YAML: {exc}"))
        return errors

    if raw is None:
        return errors

    if not isinstance(raw, dict):
        errors.append(
            ValidationError(
                code=CFG003,
                path=path_str,
                field="",
                message=f"config must be a YAML mapping, got {type(raw).__name__}",
            )
        )
        return errors

    for key in sorted(raw.keys()):
        if key not in ALLOWED_CONFIG_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=str(key),
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(str(key), ALLOWED_CONFIG_KEYS),
                )
            )

    for key in BOOLEAN_KEYS:
        if key in raw and not isinstance(raw[key], bool):
            errors.append(_type_error(path_str, key, "expected a boolean"))

    for key in UNIT_INTERVAL_KEYS:
        if key in raw:
            _check_unit_interval(raw[key], path_str, key, errors)

    for key in NON_NEGATIVE_INT_KEYS:
        if key in raw:
            _check_int(raw[key], path_str, key, 0, errors)

    for key in POSITIVE_INT_KEYS:
        if key in raw:
            _check_int(raw[key], path_str, key, 1, errors)

    if "severity_threshold" in raw:
        val = raw["severity_threshold"]
        if not isinstance(val, str) or val.lower() not in VALID_SEVERITY_THRESHOLDS:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field="severity_threshold",
                    message="invalid value for `severity_threshold`",
                    hint=f"expected one of: {', '.join(sorted(VALID_SEVERITY_THRESHOLDS))}; got: {val!r}",
                )
            )

    _validate_tool_weights(raw, path_str, errors)
    _validate_correlation_bonuses(raw, path_str, errors)
    _validate_ignore_block(raw, path_str, errors)
    _validate_severity_overrides(raw, path_str, errors)
    _validate_adaptive_block(raw, path_str, errors)

    return errors


def _type_error(path_str: str, field: str, hint: str) -> ValidationError:
    return ValidationError(
        code=CFG005,
        path=path_str,
        field=field,
        message=f"invalid type for `{field}`",
        hint=hint,
    )


def _is_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float))


def _check_unit_interval(value: Any, path_str: str, field: str, errors: list[ValidationError]) -> None:
    if not _is_number(value):
        errors.append(_type_error(path_str, field, "expected a number between 0 and 1"))
    elif not 0 <= value <= 1:
        errors.append(
            ValidationError(
                code=CFG007,
                path=path_str,
                field=field,
                message=f"`{field}` must be between 0 and 1, got {value}",
            )
        )


def _check_int(value: Any, path_str: str, field: str, minimum: int, errors: list[ValidationError]) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(_type_error(path_str, field, "expected an integer"))
    elif value < minimum:
        errors.append(
            ValidationError(
                code=CFG007,
                path=path_str,
                field=field,
                message=f"`{field}` must be >= {minimum}, got {value}",
            )
        )


def _nested_mapping(raw: dict[str, Any], key: str, path_str: str, errors: list[ValidationError]) -> dict | None:
    """Return the nested mapping under ``key`` or record CFG009 when it is not one."""
    if key not in raw or raw[key] is None:
        return None
    block = raw[key]
    if not isinstance(block, dict):
        errors.append(ValidationError(code=CFG009, path=path_str, field=key, message=f"`{key}` must be a mapping"))
        return None
    return block


def _validate_tool_weights(raw: dict[str, Any], path_str: str, errors: list[ValidationError]) -> None:
    block = _nested_mapping(raw, "tool_weights", path_str, errors)
    if block is None:
        return
    for tool in sorted(block, key=str):
        weight = block[tool]
        if not _is_number(weight) or weight < 0:
            errors.append(_type_error(path_str, f"tool_weights.{tool}", "expected a non-negative number"))


def _validate_correlation_bonuses(raw: dict[str, Any], path_str: str, errors: list[ValidationError]) -> None:
    block = _nested_mapping(raw, "correlation_bonuses", path_str, errors)
    if block is None:
        return
    for key in sorted(block, key=str):
        field = f"correlation_bonuses.{key}"
        if key not in CORRELATION_BONUS_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=field,
                    message=f"unknown key `{key}` in `correlation_bonuses`",
                    hint=_suggest_key(str(key), CORRELATION_BONUS_KEYS),
                )
            )
            continue
        if not _is_number(block[key]) or block[key] < 0:
            errors.append(_type_error(path_str, field, "expected a non-negative number"))


def _validate_ignore_block(raw: dict[str, Any], path_str: str, errors: list[ValidationError]) -> None:
    block = _nested_mapping(raw, "ignore", path_str, errors)
    if block is None:
        return
    for key in sorted(block, key=str):
        if key not in IGNORE_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=f"ignore.{key}",
                    message=f"unknown key `{key}` in `ignore`",
                    hint=_suggest_key(str(key), IGNORE_KEYS),
                )
            )
    for key in ("files", "rules"):
        val = block.get(key)
        if val is not None and (not isinstance(val, list) or not all(isinstance(item, str) for item in val)):
            errors.append(_type_error(path_str, f"ignore.{key}", "expected a list of strings"))

    ignored_rules = block.get("rules") or []
    overrides = raw.get("severity_overrides") or {}
    if isinstance(ignored_rules, list) and isinstance(overrides, dict):
        overlap = sorted({rule for rule in ignored_rules if isinstance(rule, str)} & set(overrides))
        if overlap:
            errors.append(
                ValidationError(
                    code=CFG008,
                    path=path_str,
                    field="ignore.rules",
                    message=f"rule(s) both ignored and severity-overridden: {', '.join(overlap)}",
                    hint="remove the rule from one of the two blocks",
                )
            )


def _validate_severity_overrides(raw: dict[str, Any], path_str: str, errors: list[ValidationError]) -> None:
    block = _nested_mapping(raw, "severity_overrides", path_str, errors)
    if block is None:
        return
    for rule_id in sorted(block, key=str):
        val = block[rule_id]
        if not isinstance(val, str) or val.lower() not in VALID_SEVERITIES:
            errors.append(
                ValidationError(
                    code=CFG006,
                    path=path_str,
                    field=f"severity_overrides.{rule_id}",
                    message=f"invalid severity for `{rule_id}`",
                    hint=f"expected one of: {', '.join(sorted(VALID_SEVERITIES))}; got: {val!r}",
                )
            )


def _validate_adaptive_block(raw: dict[str, Any], path_str: str, errors: list[ValidationError]) -> None:
    block = _nested_mapping(raw, "adaptive", path_str, errors)
    if block is None:
        return
    for key in sorted(block, key=str):
        if key not in ADAPTIVE_KEYS:
            errors.append(
                ValidationError(
                    code=CFG004,
                    path=path_str,
                    field=f"adaptive.{key}",
                    message=f"unknown key `{key}` in `adaptive`",
                    hint=_suggest_key(str(key), ADAPTIVE_KEYS),
                )
            )
    if "dismissal_threshold" in block:
        _check_int(block["dismissal_threshold"], path_str, "adaptive.dismissal_threshold", 1, errors)
    if "max_age_days" in block:
        _check_int(block["max_age_days"], path_str, "adaptive.max_age_days", 1, errors)
    if "confidence_reduction" in block:
        _check_unit_interval(block["confidence_reduction"], path_str, "adaptive.confidence_reduction", errors)


def _suggest_key(key: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean' hint for a mistyped key, or an empty string."""
    matches = difflib.get_close_matches(key, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
