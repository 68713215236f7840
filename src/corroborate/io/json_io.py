"""JSON read/write helpers."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from corroborate.constants.reporting import REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX
from corroborate.exceptions import CorroborateError


def load_json_file(path: Path) -> Any:
    """Parse a JSON file, raising ``CorroborateError`` on unreadable or invalid input."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CorroborateError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CorroborateError(f"Invalid JSON in {path}: {exc}") from exc


def write_text_atomic(
    *,
    path: Path,
    content: str,
    temp_prefix: str = REPORT_TEMP_PREFIX,
    temp_suffix: str = REPORT_TEMP_SUFFIX,
) -> None:
    """Write via a temp file in the target directory, then rename into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=temp_prefix, suffix=temp_suffix, dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


def write_json_atomic(
    *,
    path: Path,
    payload: Any,
    temp_prefix: str = REPORT_TEMP_PREFIX,
    temp_suffix: str = REPORT_TEMP_SUFFIX,
) -> None:
    write_text_atomic(
        path=path,
        content=json.dumps(payload, indent=2, sort_keys=False) + "\n",
        temp_prefix=temp_prefix,
        temp_suffix=temp_suffix,
    )
