from __future__ import annotations

import enum
import json
from typing import Any

from .config import Settings
from .errors import NotAnArray


class OutputMode(enum.Enum):
    LINES = "lines"
    PRETTY = "pretty"
    COMPACT = "compact"


def select_mode(settings: Settings, listing: bool) -> OutputMode:
    # --lines only applies to listing endpoints and silently wins over --pretty
    if listing and settings.lines:
        return OutputMode.LINES
    if settings.pretty:
        return OutputMode.PRETTY
    return OutputMode.COMPACT


# ---------- value post-processing ----------

def extract_result(value: Any) -> Any:
    """Return value["result"] when present, otherwise the value untouched."""
    if isinstance(value, dict) and "result" in value:
        return value["result"]
    return value


def filter_values(value: Any, needle: str) -> Any:
    """
    Keep the string elements containing needle (case-insensitive).
    Non-string elements are dropped; a non-list value is returned as-is.
    """
    if not isinstance(value, list):
        return value
    needle = needle.lower()
    return [v for v in value if isinstance(v, str) and needle in v.lower()]


# ---------- rendering ----------

def to_json(value: Any, pretty: bool = False) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def render_lines(value: Any) -> str:
    if not isinstance(value, list):
        raise NotAnArray()
    out = []
    for item in value:
        out.append(item if isinstance(item, str) else to_json(item))
    return "".join(f"{line}\n" for line in out)


def render(value: Any, mode: OutputMode) -> str:
    if mode is OutputMode.LINES:
        return render_lines(value)
    if mode is OutputMode.PRETTY:
        return to_json(value, pretty=True) + "\n"
    if mode is OutputMode.COMPACT:
        return to_json(value) + "\n"
    raise ValueError(f"unknown output mode: {mode!r}")
