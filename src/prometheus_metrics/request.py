from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

import httpx

from . import __version__
from .auth import AuthMode, auth_headers, basic_credentials
from .errors import InvalidUrl, MissingMatcher

Params = Tuple[Tuple[str, str], ...]

DEFAULT_STEP = "60s"
USER_AGENT = f"prometheus-metrics/{__version__}"


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    path: str
    params: Params = ()
    # listing endpoints return a flat array and support lines output
    listing: bool = False


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    params: Params = ()
    body: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)
    basic_auth: Optional[Tuple[str, str]] = None


def _optional(*pairs: Tuple[str, Optional[str]]) -> List[Tuple[str, str]]:
    return [(k, v) for k, v in pairs if v is not None]


def _match_params(matches: Sequence[str], start: Optional[str] = None, end: Optional[str] = None) -> Params:
    params = [("match[]", m) for m in matches]
    params += _optional(("start", start), ("end", end))
    return tuple(params)


# ---- operations ----

def query_operation(query: str, time: Optional[str] = None, timeout: Optional[str] = None) -> Operation:
    params = [("query", query)] + _optional(("time", time), ("timeout", timeout))
    return Operation("query", "POST", "api/v1/query", tuple(params))


def range_operation(
    query: str,
    start: str,
    end: str,
    step: Optional[str] = None,
    timeout: Optional[str] = None,
) -> Operation:
    params = [
        ("query", query),
        ("start", start),
        ("end", end),
        ("step", step or DEFAULT_STEP),
    ]
    params += _optional(("timeout", timeout))
    return Operation("range", "POST", "api/v1/query_range", tuple(params))


def labels_operation(label: str, matches: Sequence[str] = ()) -> Operation:
    return Operation("labels", "GET", f"api/v1/label/{label}/values", _match_params(matches), listing=True)


def jobs_operation() -> Operation:
    return Operation("jobs", "GET", "api/v1/label/job/values", listing=True)


def metrics_operation() -> Operation:
    # --filter is applied to the response, never sent to the server
    return Operation("metrics", "GET", "api/v1/label/__name__/values", listing=True)


def series_operation(matches: Sequence[str], start: Optional[str] = None, end: Optional[str] = None) -> Operation:
    if not matches:
        raise MissingMatcher()
    return Operation("series", "GET", "api/v1/series", _match_params(matches, start, end))


# ---- request building ----

def resolve_endpoint(base_url: str, path: str) -> str:
    try:
        url = httpx.URL(base_url).join(path)
    except httpx.InvalidURL as e:
        raise InvalidUrl(f"invalid base URL or path: {base_url!r} + {path!r}") from e
    if not url.is_absolute_url:
        raise InvalidUrl(f"invalid base URL: {base_url!r}")
    return str(url)


def build_request(base_url: str, operation: Operation, auth: AuthMode) -> RequestDescriptor:
    """
    Turn an Operation into a concrete HTTP request. POST operations send their
    parameters as an ordered form body; GET operations as a query string, with
    repeated keys (match[]) kept once per value.
    """
    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    headers.update(auth_headers(auth))

    url = resolve_endpoint(base_url, operation.path)

    if operation.method == "POST":
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        return RequestDescriptor(
            method="POST",
            url=url,
            body=urlencode(operation.params).encode("utf-8"),
            headers=headers,
            basic_auth=basic_credentials(auth),
        )

    return RequestDescriptor(
        method=operation.method,
        url=url,
        params=operation.params,
        headers=headers,
        basic_auth=basic_credentials(auth),
    )
