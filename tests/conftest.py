import functools
import json

import httpx
import pytest

from prometheus_metrics import cli
from prometheus_metrics.prometheus import PrometheusClient


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's config file and PROMQL_* variables out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "PROMQL_BASE_URL",
        "PROMQL_AUTH",
        "PROMQL_USER",
        "PROMQL_PASS",
        "PROMQL_BEARER",
        "PROMQL_CONFIG",
        "PROMQL_HTTP_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


class FakePrometheus:
    """Records requests and answers each with the configured envelope."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = json.dumps({"status": "success", "data": []})

    def respond(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self.body = text if text is not None else json.dumps(payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def fake_prometheus(monkeypatch):
    fake = FakePrometheus()
    http = httpx.Client(transport=httpx.MockTransport(fake.handler))
    monkeypatch.setattr(cli, "PrometheusClient", functools.partial(PrometheusClient, client=http))
    yield fake
    http.close()
