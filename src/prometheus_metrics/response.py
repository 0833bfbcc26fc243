from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .errors import MalformedResponse, RemoteError

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200

WarningSink = Callable[[str], None]


@dataclass(frozen=True)
class Envelope:
    status: str
    data: Any = None
    error_type: Optional[str] = None
    error: Optional[str] = None
    warnings: Optional[List[str]] = None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {literal}")
    return value


def _is_opt_str(value: Any) -> bool:
    return value is None or isinstance(value, str)


def parse_envelope(http_status: int, raw_body: str) -> Envelope:
    """
    Parse the {status, data?, errorType?, error?, warnings?} wrapper.
    Anything that doesn't fit that shape is a MalformedResponse carrying the
    HTTP status and a short body preview.
    """
    malformed = MalformedResponse(http_status, raw_body[:PREVIEW_CHARS])
    try:
        doc = json.loads(raw_body, parse_constant=_reject_constant, parse_float=_finite_float)
    except (ValueError, RecursionError) as e:
        raise malformed from e

    if not isinstance(doc, dict) or not isinstance(doc.get("status"), str):
        raise malformed
    if not _is_opt_str(doc.get("errorType")) or not _is_opt_str(doc.get("error")):
        raise malformed

    warnings = doc.get("warnings")
    if warnings is not None and not (
        isinstance(warnings, list) and all(isinstance(w, str) for w in warnings)
    ):
        raise malformed

    return Envelope(
        status=doc["status"],
        data=doc.get("data"),
        error_type=doc.get("errorType"),
        error=doc.get("error"),
        warnings=warnings,
    )


def _log_warning(warning: str) -> None:
    logger.warning("warning: %s", warning)


def validate(http_status: int, raw_body: str, on_warning: Optional[WarningSink] = None) -> Any:
    """
    Returns the envelope's data (None when the server omitted it).
    Raises RemoteError for any status other than "success", whatever the
    HTTP status code was.
    """
    env = parse_envelope(http_status, raw_body)

    if env.status != "success":
        raise RemoteError(
            env.error_type if env.error_type is not None else "unknown",
            env.error if env.error is not None else "unknown error",
        )

    sink = on_warning or _log_warning
    for w in env.warnings or []:
        sink(w)

    return env.data
