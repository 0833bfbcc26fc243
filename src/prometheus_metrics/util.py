from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from .errors import InvalidUrl


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


@dataclass(frozen=True)
class Paths:
    config_path: Path

    @staticmethod
    def default() -> "Paths":
        # XDG-ish default
        base = Path(env("XDG_CONFIG_HOME") or (Path.home() / ".config"))
        return Paths(config_path=base / "prometheus-metrics" / "config.toml")


def normalize_base_url(base: str) -> str:
    """
    Ensure the base URL ends with '/' so relative endpoint paths join under it
    instead of replacing its last segment.
    """
    if not base.endswith("/"):
        base += "/"
    try:
        url = httpx.URL(base)
    except httpx.InvalidURL as e:
        raise InvalidUrl(f"invalid base URL: {base!r}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidUrl(f"invalid base URL: {base!r}")
    return str(url)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
