"""Mapping of a decoded stats snapshot onto uwsgi_* measurements."""

from __future__ import annotations

from collections.abc import AsyncIterable

from .base import MetricSink
from .decoder import decode_snapshot
from .models import StatsSnapshot

OVERVIEW = "uwsgi_overview"
WORKERS = "uwsgi_workers"
APPS = "uwsgi_apps"


def gather_overview(snapshot: StatsSnapshot, sink: MetricSink) -> None:
    fields = {
        "listen_queue": snapshot.listen_queue,
        "listen_queue_errors": snapshot.listen_queue_errors,
        "signal_queue": snapshot.signal_queue,
        "load": snapshot.load,
    }
    tags = {
        "url": snapshot.url,
        "pid": str(snapshot.pid),
        "uid": str(snapshot.uid),
        "gid": str(snapshot.gid),
        "version": snapshot.version,
        "cwd": snapshot.cwd,
    }
    sink.add_fields(OVERVIEW, fields, tags)


def gather_workers(snapshot: StatsSnapshot, sink: MetricSink) -> None:
    for w in snapshot.workers:
        fields = {
            "requests": w.requests,
            "accepting": w.accepting,
            "delta_request": w.delta_requests,
            "harakiri_count": w.harakiri_count,
            "signals": w.signals,
            "signal_queue": w.signal_queue,
            "status": w.status,
            "rss": w.rss,
            "vsz": w.vsz,
            "running_time": w.running_time,
            "last_spawn": w.last_spawn,
            "respawn_count": w.respawn_count,
            "tx": w.tx,
            "avg_rt": w.avg_rt,
        }
        tags = {
            "worker_id": str(w.worker_id),
            "url": snapshot.url,
            "pid": str(w.pid),
        }
        sink.add_fields(WORKERS, fields, tags)


def gather_apps(snapshot: StatsSnapshot, sink: MetricSink) -> None:
    for w in snapshot.workers:
        for a in w.apps:
            fields = {
                "modifier1": a.modifier1,
                "requests": a.requests,
                "startup_time": a.startup_time,
                "exceptions": a.exceptions,
            }
            tags = {
                "app_id": str(a.app_id),
                "worker_id": str(w.worker_id),
                "mountpoint": a.mountpoint,
                "chdir": a.chdir,
            }
            sink.add_fields(APPS, fields, tags)


def gather_snapshot(snapshot: StatsSnapshot, sink: MetricSink) -> None:
    """Emit the overview, then every worker, then every app."""
    gather_overview(snapshot, sink)
    gather_workers(snapshot, sink)
    gather_apps(snapshot, sink)


async def process(
    chunks: AsyncIterable[bytes], label: str, sink: MetricSink
) -> StatsSnapshot:
    """Decode one document from ``chunks`` and emit its measurements.

    ``label`` replaces whatever url the payload carried. Malformed input still
    yields a zero-valued overview record.
    """
    snapshot = await decode_snapshot(chunks)
    snapshot.url = label
    gather_snapshot(snapshot, sink)
    return snapshot
