from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .config import Settings
from .errors import IncompleteCredentials, InvalidAuthFormat


@dataclass(frozen=True)
class NoAuth:
    pass


@dataclass(frozen=True)
class BearerAuth:
    token: str


@dataclass(frozen=True)
class BasicAuth:
    user: str
    password: str


AuthMode = Union[NoAuth, BearerAuth, BasicAuth]


def split_auth(auth: str) -> Tuple[str, str]:
    """Split "user:password" on the first colon; the password may contain colons."""
    user, sep, password = auth.partition(":")
    if not user or not sep:
        raise InvalidAuthFormat()
    return user, password


def select_auth(settings: Settings) -> AuthMode:
    """
    Precedence: bearer > combined user:password > separate user/password > none.
    Conflicting options are resolved, never rejected.
    """
    if settings.bearer is not None:
        return BearerAuth(settings.bearer)

    if settings.auth is not None:
        user, password = split_auth(settings.auth)
        return BasicAuth(user, password)

    if settings.user is not None or settings.password is not None:
        if settings.user is None:
            raise IncompleteCredentials("user", "password")
        if settings.password is None:
            raise IncompleteCredentials("password", "user")
        return BasicAuth(settings.user, settings.password)

    return NoAuth()


def auth_headers(mode: AuthMode) -> Dict[str, str]:
    if isinstance(mode, BearerAuth):
        return {"Authorization": f"Bearer {mode.token}"}
    return {}


def basic_credentials(mode: AuthMode) -> Optional[Tuple[str, str]]:
    if isinstance(mode, BasicAuth):
        return (mode.user, mode.password)
    return None
