"""Collector for uWSGI stats servers (http, tcp and unix socket endpoints)."""

from __future__ import annotations

import logging

import httpx

from .base import Accumulator, BaseCollector, CollectorResult, MetricSink
from .connector import DIAL_TIMEOUT, open_stream
from .errors import CollectorError
from .mapper import process
from .target import parse_target

logger = logging.getLogger(__name__)

DESCRIPTION = "Read uWSGI metrics."

SAMPLE_CONFIG = """\
servers:
  - name: uwsgi
    type: uwsgi
    ## List of uWSGI stats server urls. Each must match scheme://address[:port]
    ## or be a bare host:port (http). For example:
    ## urls: ["tcp://localhost:5050", "http://localhost:1717", "unix:///tmp/statsock"]
    urls: []
    poll_every: 10
    timeout: 5
    fail_fast: false
"""


class UwsgiCollector(BaseCollector):
    def __init__(
        self,
        name: str,
        servers: list[str],
        poll_every: int = 10,
        timeout: float = DIAL_TIMEOUT,
        fail_fast: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(name, poll_every, url=", ".join(servers))
        self.servers = list(servers)
        self.timeout = timeout
        self.fail_fast = fail_fast
        self.transport = transport

    @property
    def description(self) -> str:
        return DESCRIPTION

    async def gather_server(self, server: str, sink: MetricSink) -> None:
        target = parse_target(server)
        async with open_stream(target, self.timeout, self.transport) as chunks:
            await process(chunks, target.raw, sink)

    async def gather(self, sink: MetricSink) -> dict[str, str]:
        """Poll every configured server once, in order.

        Returns the failed servers mapped to their error message. With
        ``fail_fast`` the first failure is raised instead and the remaining
        servers are not polled.
        """
        errors: dict[str, str] = {}
        for server in self.servers:
            try:
                await self.gather_server(server, sink)
            except CollectorError as exc:
                if self.fail_fast:
                    raise
                logger.warning("%s: %s", self.name, exc)
                errors[server] = str(exc)
        return errors

    async def collect(self) -> CollectorResult:
        acc = Accumulator()
        try:
            errors = await self.gather(acc)
        except CollectorError as exc:
            logger.warning("%s: sweep aborted: %s", self.name, exc)
            errors = {getattr(exc, "target", self.name): str(exc)}
        return CollectorResult(name=self.name, measurements=acc.measurements, errors=errors)
