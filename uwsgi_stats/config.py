"""Loading of servers.yaml into collectors."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .collector import UwsgiCollector
from .connector import DIAL_TIMEOUT
from .errors import ConfigError

logger = logging.getLogger(__name__)


def load_config(path: Path) -> list[UwsgiCollector]:
    """Parse servers.yaml and return a list of collectors."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed config file {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    collectors: list[UwsgiCollector] = []
    for srv in config.get("servers") or []:
        try:
            name = srv["name"]
            stype = srv.get("type", "uwsgi")
            if stype != "uwsgi":
                logger.warning("unknown server type '%s' for '%s', skipping", stype, name)
                continue
            urls = srv["urls"]
        except (KeyError, TypeError) as exc:
            raise ConfigError(f"Server entry {srv!r} is missing required key {exc}") from exc

        if isinstance(urls, str):
            urls = [urls]
        collectors.append(
            UwsgiCollector(
                name=name,
                servers=[str(u) for u in urls],
                poll_every=srv.get("poll_every", 10),
                timeout=srv.get("timeout", DIAL_TIMEOUT),
                fail_fast=bool(srv.get("fail_fast", False)),
            )
        )

    return collectors
