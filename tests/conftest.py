"""Shared fixtures for the uwsgi_stats tests."""

import asyncio
import json

import pytest


SAMPLE_STATS = {
    "version": "2.0.21",
    "listen_queue": 3,
    "listen_queue_errors": 1,
    "signal_queue": 0,
    "load": 7,
    "pid": 74133,
    "uid": 33,
    "gid": 33,
    "cwd": "/var/www/frontend",
    "url": "payload-supplied",
    "locks": [{"user 0": 0}, {"signal": 0}],
    "workers": [
        {
            "id": 1,
            "pid": 74134,
            "accepting": 1,
            "requests": 1200,
            "delta_requests": 12,
            "exceptions": 0,
            "harakiri_count": 0,
            "signals": 0,
            "signal_queue": 0,
            "status": "idle",
            "rss": 40960000,
            "vsz": 204800000,
            "running_time": 987654,
            "last_spawn": 1490000000,
            "respawn_count": 1,
            "tx": 4096000,
            "avg_rt": 12.5,
            "apps": [
                {
                    "id": 0,
                    "modifier1": 0,
                    "mountpoint": "",
                    "startup_time": 2,
                    "requests": 1200,
                    "exceptions": 4,
                    "chdir": "/var/www/frontend",
                }
            ],
        },
        {
            "id": 2,
            "pid": 74135,
            "accepting": 1,
            "requests": 800,
            "delta_requests": 3,
            "status": "busy",
            "avg_rt": 9,
            "apps": [
                {"id": 0, "mountpoint": "/api", "requests": 500},
                {"id": 1, "mountpoint": "/admin", "requests": 300, "chdir": "/srv/admin"},
            ],
        },
    ],
}


@pytest.fixture
def sample_stats():
    return json.loads(json.dumps(SAMPLE_STATS))


@pytest.fixture
def sample_payload():
    return json.dumps(SAMPLE_STATS).encode()


@pytest.fixture
def chunked():
    """Build an async chunk iterator from byte strings."""

    def build(*parts: bytes):
        async def gen():
            for part in parts:
                await asyncio.sleep(0)
                yield part

        return gen()

    return build


@pytest.fixture
def stats_handler():
    """Build a stream handler that writes ``payload`` and hangs up."""

    def build(payload: bytes):
        async def handle(reader, writer):
            writer.write(payload)
            await writer.drain()
            writer.close()

        return handle

    return build


@pytest.fixture
def http_responder():
    """Build a stream handler answering one HTTP request with a raw response."""

    def build(body: bytes, headers: dict[str, str] | None = None, status: str = "200 OK"):
        async def handle(reader, writer):
            await reader.readuntil(b"\r\n\r\n")
            lines = [f"HTTP/1.1 {status}", f"Content-Length: {len(body)}", "Connection: close"]
            lines += [f"{key}: {value}" for key, value in (headers or {}).items()]
            writer.write(("\r\n".join(lines) + "\r\n\r\n").encode() + body)
            await writer.drain()
            writer.close()

        return handle

    return build


@pytest.fixture
def silent_handler():
    """A stream handler that accepts, never answers, and waits for the peer to leave."""

    async def handle(reader, writer):
        await reader.read()
        writer.close()

    return handle
