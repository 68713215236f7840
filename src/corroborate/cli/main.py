"""CLI entrypoint for Corroborate."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from corroborate import __version__
from corroborate.config import load_config, validate_config_file
from corroborate.constants.branding import CLI_DESCRIPTION
from corroborate.constants.config import VALID_SEVERITY_THRESHOLDS
from corroborate.constants.reporting import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_PROMPT_MAX_FINDINGS,
    SCHEMA_VERSION,
    VALID_OUTPUT_FORMATS,
)
from corroborate.exceptions import ConfigError, CorroborateError
from corroborate.exceptions.validation import format_errors
from corroborate.io import load_json_file, write_json_atomic, write_text_atomic
from corroborate.reporting.prompt import format_findings_for_prompt
from corroborate.scanner import AnalysisContext, analyze_findings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="corroborate",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    aggregate = subparsers.add_parser("aggregate", help="Aggregate detector findings into a scored result")
    aggregate.add_argument("-i", "--input", type=Path, required=True, help="JSON file with raw findings")
    aggregate.add_argument("-r", "--root", type=Path, default=Path("."), help="Directory holding corroborate.yaml")
    aggregate.add_argument("-c", "--config", type=Path, help="Explicit config file")
    aggregate.add_argument(
        "--format",
        choices=sorted(VALID_OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help="Output format: json (full result) or prompt (Markdown for an LLM prompt)",
    )
    aggregate.add_argument("-o", "--output", type=Path, default=None, help="Write output here instead of stdout")
    aggregate.add_argument(
        "--severity-threshold",
        choices=sorted(VALID_SEVERITY_THRESHOLDS),
        default=None,
        help="Hide findings below this severity (overrides config)",
    )
    aggregate.add_argument(
        "--max-prompt-findings",
        type=int,
        default=DEFAULT_PROMPT_MAX_FINDINGS,
        help="Findings rendered in prompt format before truncating",
    )
    aggregate.add_argument("--repo-id", default=None, help="Repository identifier for adaptive scoring")

    validate = subparsers.add_parser("validate-config", help="Validate configuration without aggregating")
    validate.add_argument("-r", "--root", type=Path, default=Path("."), help="Directory holding corroborate.yaml")
    validate.add_argument("-c", "--config", type=Path, help="Explicit config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return _handle_validate_config(args)

    if args.command != "aggregate":
        parser.error(f"Unsupported command: {args.command}")

    if args.max_prompt_findings < 1:
        print("Configuration error: --max-prompt-findings must be >= 1", file=sys.stderr)
        return 2

    validation_errors = validate_config_file(args.root, args.config, config_explicit=args.config is not None)
    if validation_errors:
        print(format_errors(validation_errors), file=sys.stderr)
        return 2

    try:
        config = load_config(args.root, args.config)
        if args.severity_threshold is not None:
            config = replace(config, severity_threshold=args.severity_threshold)
        findings, llm_findings = _read_findings(load_json_file(args.input))
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except CorroborateError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1

    result = analyze_findings(
        findings,
        config=config,
        context=AnalysisContext(repo_id=args.repo_id, llm_findings=tuple(llm_findings)),
    )

    if args.format == "prompt":
        text = format_findings_for_prompt(result.findings, args.max_prompt_findings) or "No findings.\n"
        _emit_text(text, args.output)
        return 0

    payload = {"schema_version": SCHEMA_VERSION, **result.to_dict()}
    if args.output is not None:
        write_json_atomic(path=args.output, payload=payload)
    else:
        print(json.dumps(payload, indent=2))
    return 0


def _read_findings(document: Any) -> tuple[list[Any], list[Any]]:
    """Accept a finding list, ``{findings, llm_findings}``, or ``{tool: {findings}}``.

    In the per-tool form each finding is stamped with its tool name.
    """
    if isinstance(document, list):
        return document, []
    if not isinstance(document, Mapping):
        raise CorroborateError("Input must be a JSON list or object")

    if "findings" in document:
        findings = document.get("findings")
        llm_findings = document.get("llm_findings") or []
        if not isinstance(findings, list) or not isinstance(llm_findings, list):
            raise CorroborateError("`findings` and `llm_findings` must be lists")
        return findings, llm_findings

    collected: list[Any] = []
    for tool, section in document.items():
        items = section.get("findings") if isinstance(section, Mapping) else None
        if not isinstance(items, list):
            logger.warning("Ignoring input section %r without a findings list", tool)
            continue
        collected.extend({**item, "tool": tool} if isinstance(item, Mapping) else item for item in items)
    return collected, []


def _emit_text(text: str, output: Path | None) -> None:
    if output is not None:
        write_text_atomic(path=output, content=text)
    else:
        sys.stdout.write(text)


def _handle_validate_config(args: argparse.Namespace) -> int:
    """Run config validation and report results."""
    errors = validate_config_file(args.root, args.config, config_explicit=args.config is not None)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
