"""Data models for the uWSGI stats server document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _number(data: dict[str, Any], key: str) -> int | float:
    value = data.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    return 0


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _objects(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


@dataclass
class AppStats:
    app_id: int = 0
    modifier1: int = 0
    requests: int = 0
    startup_time: int = 0
    exceptions: int = 0
    mountpoint: str = ""
    chdir: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppStats:
        return cls(
            app_id=_int(data, "id"),
            modifier1=_int(data, "modifier1"),
            requests=_int(data, "requests"),
            startup_time=_int(data, "startup_time"),
            exceptions=_int(data, "exceptions"),
            mountpoint=_str(data, "mountpoint"),
            chdir=_str(data, "chdir"),
        )


@dataclass
class WorkerStats:
    worker_id: int = 0
    pid: int = 0
    requests: int = 0
    accepting: int = 0
    delta_requests: int = 0
    harakiri_count: int = 0
    signals: int = 0
    signal_queue: int = 0
    status: str = ""
    rss: int = 0
    vsz: int = 0
    running_time: int = 0
    last_spawn: int = 0
    respawn_count: int = 0
    tx: int = 0
    avg_rt: int | float = 0
    apps: list[AppStats] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkerStats:
        return cls(
            worker_id=_int(data, "id"),
            pid=_int(data, "pid"),
            requests=_int(data, "requests"),
            accepting=_int(data, "accepting"),
            delta_requests=_int(data, "delta_requests"),
            harakiri_count=_int(data, "harakiri_count"),
            signals=_int(data, "signals"),
            signal_queue=_int(data, "signal_queue"),
            status=_str(data, "status"),
            rss=_int(data, "rss"),
            vsz=_int(data, "vsz"),
            running_time=_int(data, "running_time"),
            last_spawn=_int(data, "last_spawn"),
            respawn_count=_int(data, "respawn_count"),
            tx=_int(data, "tx"),
            avg_rt=_number(data, "avg_rt"),
            apps=[AppStats.from_dict(a) for a in _objects(data, "apps")],
        )


@dataclass
class StatsSnapshot:
    """One decoded stats document. ``url`` is always the configured target."""

    url: str = ""
    listen_queue: int = 0
    listen_queue_errors: int = 0
    signal_queue: int = 0
    load: int | float = 0
    pid: int = 0
    uid: int = 0
    gid: int = 0
    version: str = ""
    cwd: str = ""
    workers: list[WorkerStats] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatsSnapshot:
        # The payload's own "url", if any, is ignored.
        return cls(
            listen_queue=_int(data, "listen_queue"),
            listen_queue_errors=_int(data, "listen_queue_errors"),
            signal_queue=_int(data, "signal_queue"),
            load=_number(data, "load"),
            pid=_int(data, "pid"),
            uid=_int(data, "uid"),
            gid=_int(data, "gid"),
            version=_str(data, "version"),
            cwd=_str(data, "cwd"),
            workers=[WorkerStats.from_dict(w) for w in _objects(data, "workers")],
        )
