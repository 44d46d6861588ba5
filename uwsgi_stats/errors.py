"""Exceptions raised while polling uWSGI stats servers."""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for everything this package raises."""


class TargetParseError(CollectorError):
    """A configured target string is not a usable stats server URL."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"Could not parse uWSGI stats server url '{target}': {reason}")
        self.target = target
        self.reason = reason


class TargetConnectionError(CollectorError):
    """Dialing a stats server (or issuing the HTTP request) failed."""

    def __init__(self, target: str, cause: str) -> None:
        super().__init__(f"Could not connect to uWSGI stats server '{target}': {cause}")
        self.target = target
        self.cause = cause


class ConfigError(CollectorError):
    """The servers file is missing, malformed or incomplete."""
