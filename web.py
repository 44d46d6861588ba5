#!/usr/bin/env python3
"""uWSGI Monitor: HTTP API over the latest polled measurements.

Usage:
    python web.py                              # default config, port 9860
    python web.py -c myconfig.yaml --port 8080 # custom config and port
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from uwsgi_stats import BaseCollector, CollectorResult, ConfigError, load_config

logger = logging.getLogger("uwsgi_monitor.web")


# ---------------------------------------------------------------------------
# Shared state: latest result per collector
# ---------------------------------------------------------------------------

_state: dict[str, dict] = {}
_collectors: list[BaseCollector] = []
_tasks: list[asyncio.Task] = []
_start_time: float = time.time()
_total_polls: int = 0


def record(collector: BaseCollector, result: CollectorResult) -> None:
    """Store the latest result of ``collector``."""
    global _total_polls
    _total_polls += 1
    _state[collector.name] = {
        "name": collector.name,
        "url": collector.url,
        "poll_every": collector.poll_every,
        "last_updated": time.time(),
        "measurements": [m.to_dict() for m in result.measurements],
        "errors": result.errors,
        "error": result.error,
    }


async def _poll_loop(collector: BaseCollector) -> None:
    """Background poll loop for a single collector."""
    while True:
        record(collector, await collector.collect())
        await asyncio.sleep(collector.poll_every)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start collector tasks on startup, cancel on shutdown."""
    for c in _collectors:
        _tasks.append(asyncio.create_task(_poll_loop(c)))
    yield
    for t in _tasks:
        t.cancel()
    _tasks.clear()


app = FastAPI(title="uWSGI Monitor", lifespan=lifespan)


@app.get("/api/status")
async def api_status():
    """Return latest snapshot of all polled collectors."""
    return JSONResponse({"collectors": list(_state.values()), "timestamp": time.time()})


@app.get("/metrics")
async def metrics():
    """Self-monitoring counters."""
    collectors = list(_state.values())
    healthy = sum(1 for c in collectors if not c.get("error"))
    errored = sum(1 for c in collectors if c.get("error"))
    uptime = int(time.time() - _start_time)

    return JSONResponse({
        "metrics": [
            {"key": "collectors_configured", "value": len(_collectors), "unit": "count"},
            {"key": "collectors_healthy", "value": healthy, "unit": "count"},
            {"key": "collectors_errored", "value": errored, "unit": "count"},
            {"key": "uptime", "value": uptime, "unit": "s"},
            {"key": "total_polls", "value": _total_polls, "unit": "count"},
        ]
    })


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="uWSGI Monitor: web API")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "servers.yaml"),
        help="Path to servers.yaml config file",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=9860, help="Port (default: 9860)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        sys.exit(1)

    global _collectors
    try:
        _collectors = load_config(config_path)
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    if not _collectors:
        logger.error("No servers configured. Edit %s", config_path)
        sys.exit(1)

    logger.info("Starting web API on http://%s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
