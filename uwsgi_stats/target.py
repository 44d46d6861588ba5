"""Parsing of configured stats server targets."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from urllib.parse import urlsplit

from .errors import TargetParseError


class Scheme(enum.Enum):
    HTTP = "http"
    TCP = "tcp"
    UNIX = "unix"


_SCHEMES = {
    "http": Scheme.HTTP,
    "https": Scheme.HTTP,
    "tcp": Scheme.TCP,
    "unix": Scheme.UNIX,
}


@dataclass(frozen=True)
class Target:
    raw: str  # the configured string, reported as the `url` tag
    scheme: Scheme
    host: str = ""
    port: int | None = None
    path: str = ""
    url: str = ""  # full URL for HTTP targets

    def __str__(self) -> str:
        return self.raw


def parse_target(raw: str) -> Target:
    """Parse a target such as ``tcp://host:5050``, ``unix:///tmp/stats.sock``
    or a bare ``host:1717`` (which implies HTTP)."""
    if not raw:
        raise TargetParseError(raw, "empty url")
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in raw):
        raise TargetParseError(raw, "url contains whitespace or control characters")

    url = raw if "://" in raw else f"http://{raw}"
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise TargetParseError(raw, str(exc)) from exc

    scheme = _SCHEMES.get(parts.scheme.lower())
    if scheme is None:
        raise TargetParseError(raw, f"unsupported scheme '{parts.scheme}'")

    if scheme is Scheme.UNIX:
        if not parts.path:
            raise TargetParseError(raw, "missing socket path")
        return Target(raw=raw, scheme=scheme, path=parts.path)

    host = parts.hostname or ""
    if not host:
        raise TargetParseError(raw, "missing host")

    if scheme is Scheme.TCP:
        if port is None:
            raise TargetParseError(raw, "missing port")
        return Target(raw=raw, scheme=scheme, host=host, port=port)

    return Target(raw=raw, scheme=scheme, host=host, port=port, url=url)
