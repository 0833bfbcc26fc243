from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .auth import select_auth
from .config import Settings
from .errors import PrometheusMetricsError
from .prometheus import PrometheusClient
from .render import extract_result, render, select_mode
from .request import DEFAULT_STEP
from .util import setup_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query Prometheus/VictoriaMetrics endpoints.",
)
console = Console()
err_console = Console(stderr=True, emoji=False)


def _print_warning(warning: str) -> None:
    err_console.print(f"[yellow]warning:[/yellow] {escape(warning)}", soft_wrap=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"prometheus-metrics {__version__}")
        raise typer.Exit()


def _run(ctx: typer.Context, call: Callable[[PrometheusClient], Any], listing: bool = False) -> None:
    """Resolve settings, perform the single round trip and print the result."""
    try:
        settings = Settings.load(**ctx.obj)
        client = PrometheusClient(
            settings.base_url,
            settings.timeout_seconds,
            auth=select_auth(settings),
            on_warning=_print_warning,
        )
        value = call(client)

        if settings.result and not listing:
            value = extract_result(value)
        text = render(value, select_mode(settings, listing))
    except PrometheusMetricsError as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    typer.echo(text, nl=False)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None, "--base-url", envvar="PROMQL_BASE_URL", metavar="URL", help="Prometheus base URL"
    ),
    auth: Optional[str] = typer.Option(
        None, "--auth", envvar="PROMQL_AUTH", help="Basic auth in the form user:password"
    ),
    user: Optional[str] = typer.Option(None, "--user", envvar="PROMQL_USER", help="Basic auth user"),
    password: Optional[str] = typer.Option(
        None, "--password", envvar="PROMQL_PASS", help="Basic auth password"
    ),
    bearer: Optional[str] = typer.Option(
        None, "--bearer", envvar="PROMQL_BEARER", help="Bearer token (overrides basic auth)"
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
    result: bool = typer.Option(False, "--result", help="Print only .data.result when available"),
    lines: bool = typer.Option(False, "--lines", help="Print list endpoints as one value per line"),
    config: Optional[Path] = typer.Option(
        None, "--config", envvar="PROMQL_CONFIG", help="Config file (default: ~/.config/prometheus-metrics/config.toml)"
    ),
    http_timeout: Optional[float] = typer.Option(
        None, "--http-timeout", envvar="PROMQL_HTTP_TIMEOUT", help="HTTP client timeout in seconds"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
):
    setup_logging(verbose)
    # settings are resolved per command so `<command> --help` works without a base URL
    ctx.obj = dict(
        path=config,
        base_url=base_url,
        auth=auth,
        user=user,
        password=password,
        bearer=bearer,
        pretty=pretty,
        result=result,
        lines=lines,
        timeout_seconds=http_timeout,
        verbose=verbose,
    )


@app.command()
def query(
    ctx: typer.Context,
    promql: str = typer.Argument(..., metavar="QUERY", help="PromQL query"),
    time: Optional[str] = typer.Option(None, "--time", help="Evaluation timestamp (RFC3339 or Unix timestamp)"),
    timeout: Optional[str] = typer.Option(None, "--timeout", help="Optional query timeout (e.g. 30s)"),
):
    """Instant query."""
    _run(ctx, lambda c: c.query_instant(promql, time=time, timeout=timeout))


@app.command("range")
def range_(
    ctx: typer.Context,
    promql: str = typer.Argument(..., metavar="QUERY", help="PromQL query"),
    start: str = typer.Option(..., "--start", help="Range start (RFC3339 or Unix timestamp)"),
    end: str = typer.Option(..., "--end", help="Range end (RFC3339 or Unix timestamp)"),
    step: str = typer.Option(DEFAULT_STEP, "--step", help="Step size (e.g. 60s)"),
    timeout: Optional[str] = typer.Option(None, "--timeout", help="Optional query timeout (e.g. 30s)"),
):
    """Range query."""
    _run(ctx, lambda c: c.query_range(promql, start, end, step=step, timeout=timeout))


@app.command()
def labels(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label name"),
    matches: Optional[List[str]] = typer.Option(
        None, "--match", help="Matchers to filter label values (repeatable)"
    ),
):
    """List label values."""
    _run(ctx, lambda c: c.label_values(label, matches or []), listing=True)


@app.command()
def jobs(ctx: typer.Context):
    """List job label values."""
    _run(ctx, lambda c: c.jobs(), listing=True)


@app.command()
def metrics(
    ctx: typer.Context,
    filter_: Optional[str] = typer.Option(None, "--filter", help="Case-insensitive substring filter"),
):
    """List metric names."""
    _run(ctx, lambda c: c.metric_names(filter_), listing=True)


@app.command()
def series(
    ctx: typer.Context,
    matches: Optional[List[str]] = typer.Option(None, "--match", help="Matchers to filter series (repeatable)"),
    start: Optional[str] = typer.Option(None, "--start", help="Range start (RFC3339 or Unix timestamp)"),
    end: Optional[str] = typer.Option(None, "--end", help="Range end (RFC3339 or Unix timestamp)"),
):
    """Find series matching selector(s)."""
    _run(ctx, lambda c: c.series(matches or [], start=start, end=end))


if __name__ == "__main__":
    app()
