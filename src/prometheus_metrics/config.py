from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .util import Paths, normalize_base_url

AUTH_FIELDS = ("bearer", "auth", "user", "password")


def _load_toml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Invalid config file: {path}") from e


def _opt_str(data: Dict[str, Any], key: str, path: Path) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Invalid config file: {path} ({key} must be a string)")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Invocation settings, built once and never mutated.

    Optional config.toml (values below are defaults for the CLI flags):
      base_url = "http://localhost:9090"
      timeout_seconds = 10

      [auth]
      bearer = "..."        # or
      auth = "user:password" # or
      user = "..."
      password = "..."
    """

    base_url: str = ""
    bearer: Optional[str] = None
    auth: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None

    pretty: bool = False
    result: bool = False
    lines: bool = False

    timeout_seconds: float = 10.0
    verbose: bool = False

    @staticmethod
    def from_file(path: Optional[Path] = None) -> "Settings":
        cfg_path = path or Paths.default().config_path
        data = _load_toml(cfg_path)

        s = Settings()
        if "base_url" in data:
            s = replace(s, base_url=_opt_str(data, "base_url", cfg_path) or "")
        if "timeout_seconds" in data:
            try:
                s = replace(s, timeout_seconds=float(data["timeout_seconds"]))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid config file: {cfg_path} (timeout_seconds must be a number)") from e

        auth = data.get("auth")
        if auth is not None:
            if not isinstance(auth, dict):
                raise ConfigError(f"Invalid config file: {cfg_path} ([auth] must be a table)")
            s = replace(
                s,
                bearer=_opt_str(auth, "bearer", cfg_path),
                auth=_opt_str(auth, "auth", cfg_path),
                user=_opt_str(auth, "user", cfg_path),
                password=_opt_str(auth, "password", cfg_path),
            )
        return s

    @staticmethod
    def load(path: Optional[Path] = None, **overrides: Any) -> "Settings":
        """
        Merge the config file with command-line/env values. An override of
        None keeps the file value; the base URL is normalized last.
        Auth is taken as a whole: any auth override discards all file auth values.
        """
        s = Settings.from_file(path)

        known = {f.name for f in fields(Settings)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        if any(overrides.get(k) is not None for k in AUTH_FIELDS):
            s = replace(s, **dict.fromkeys(AUTH_FIELDS))
        s = replace(s, **{k: v for k, v in overrides.items() if v is not None})

        if not s.base_url:
            raise ConfigError("--base-url is required (or set PROMQL_BASE_URL)")
        return replace(s, base_url=normalize_base_url(s.base_url))
