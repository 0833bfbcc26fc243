from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

import httpx

from .auth import AuthMode, NoAuth
from .errors import TransportError
from .render import filter_values
from .request import (
    Operation,
    RequestDescriptor,
    build_request,
    jobs_operation,
    labels_operation,
    metrics_operation,
    query_operation,
    range_operation,
    series_operation,
)
from .response import WarningSink, validate

logger = logging.getLogger(__name__)


@dataclass
class PrometheusClient:
    """
    One-shot client: every call performs exactly one HTTP round trip.
    Pass `client` to reuse an existing httpx.Client (e.g. with a MockTransport).
    """

    base_url: str
    timeout_seconds: float = 10.0
    auth: AuthMode = field(default_factory=NoAuth)
    on_warning: Optional[WarningSink] = None
    client: Optional[httpx.Client] = field(default=None, repr=False)

    def send(self, req: RequestDescriptor) -> Tuple[int, str]:
        logger.debug("%s %s params=%s", req.method, req.url, list(req.params))
        try:
            if self.client is not None:
                r = self._do(self.client, req)
            else:
                with httpx.Client(timeout=self.timeout_seconds) as client:
                    r = self._do(client, req)
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {req.method} {req.url} ({e})") from e
        logger.debug("HTTP %s (%d bytes)", r.status_code, len(r.content))
        return r.status_code, r.text

    @staticmethod
    def _do(client: httpx.Client, req: RequestDescriptor) -> httpx.Response:
        return client.request(
            req.method,
            req.url,
            params=req.params or None,
            content=req.body,
            headers=req.headers,
            auth=req.basic_auth,
        )

    def execute(self, operation: Operation) -> Any:
        req = build_request(self.base_url, operation, self.auth)
        status, body = self.send(req)
        return validate(status, body, on_warning=self.on_warning)

    # ---- queries ----

    def query_instant(self, promql: str, time: Optional[str] = None, timeout: Optional[str] = None) -> Any:
        return self.execute(query_operation(promql, time=time, timeout=timeout))

    def query_range(
        self,
        promql: str,
        start: str,
        end: str,
        step: Optional[str] = None,
        timeout: Optional[str] = None,
    ) -> Any:
        return self.execute(range_operation(promql, start, end, step=step, timeout=timeout))

    # ---- discovery ----

    def label_values(self, label: str, matches: Sequence[str] = ()) -> Any:
        return self.execute(labels_operation(label, matches))

    def jobs(self) -> Any:
        return self.execute(jobs_operation())

    def metric_names(self, filter: Optional[str] = None) -> Any:
        """Metric names, optionally narrowed client-side by a case-insensitive substring."""
        names = self.execute(metrics_operation())
        if filter is not None:
            names = filter_values(names, filter)
        return names

    def series(self, matches: Sequence[str], start: Optional[str] = None, end: Optional[str] = None) -> Any:
        return self.execute(series_operation(matches, start=start, end=end))
