#!/usr/bin/env python3
"""uWSGI Monitor: poll uWSGI stats servers and print line protocol.

Usage:
    python monitor.py                    # use default config/servers.yaml
    python monitor.py -c myconfig.yaml   # use custom config
    python monitor.py --once             # one sweep, then exit
    python monitor.py --sample-config    # print an example servers.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from uwsgi_stats import BaseCollector, CollectorResult, ConfigError, load_config
from uwsgi_stats.collector import SAMPLE_CONFIG

logger = logging.getLogger("uwsgi_monitor")


def emit(result: CollectorResult) -> None:
    for measurement in result.measurements:
        print(measurement.to_line())
    sys.stdout.flush()


async def _poll_loop(collector: BaseCollector) -> None:
    """Poll a single collector forever."""
    while True:
        emit(await collector.collect())
        await asyncio.sleep(collector.poll_every)


async def run_once(collectors: list[BaseCollector]) -> bool:
    """Sweep every collector once. Returns True when every target answered."""
    results = await asyncio.gather(*(c.collect() for c in collectors))
    for result in results:
        emit(result)
    return all(r.reachable for r in results)


async def run_forever(collectors: list[BaseCollector]) -> None:
    await asyncio.gather(*(_poll_loop(c) for c in collectors))


def main() -> None:
    parser = argparse.ArgumentParser(description="uWSGI stats poller")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "servers.yaml"),
        help="Path to servers.yaml config file",
    )
    parser.add_argument("--once", action="store_true", help="Poll every server once and exit")
    parser.add_argument(
        "--sample-config", action="store_true", help="Print an example servers.yaml and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.sample_config:
        print(SAMPLE_CONFIG, end="")
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        sys.exit(1)

    try:
        collectors = load_config(config_path)
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    if not collectors:
        logger.error("No servers configured. Edit %s", config_path)
        sys.exit(1)

    if args.once:
        ok = asyncio.run(run_once(collectors))
        sys.exit(0 if ok else 1)

    try:
        asyncio.run(run_forever(collectors))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
