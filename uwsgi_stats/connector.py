"""Opening a byte stream to a uWSGI stats server over HTTP, TCP or a Unix socket."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

import httpx

from .errors import TargetConnectionError
from .target import Scheme, Target, parse_target

logger = logging.getLogger(__name__)

DIAL_TIMEOUT = 5.0
RESPONSE_HEADER_TIMEOUT = 5.0
REQUEST_TIMEOUT = 10.0
CHUNK_SIZE = 64 * 1024


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__


async def _socket_chunks(reader: asyncio.StreamReader, target: Target) -> AsyncIterator[bytes]:
    while True:
        try:
            chunk = await reader.read(CHUNK_SIZE)
        except ConnectionError as exc:
            logger.debug("connection to %s dropped mid-document: %s", target, exc)
            return
        if not chunk:
            return
        yield chunk


async def _http_chunks(response: httpx.Response, target: Target) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as exc:
        # Covers content-decoding failures too; treated as a truncated body.
        logger.debug("response from %s ended mid-document: %s", target, exc)


async def _dial(
    target: Target, timeout: float
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    try:
        if target.scheme is Scheme.UNIX:
            conn = asyncio.open_unix_connection(target.path)
        else:
            conn = asyncio.open_connection(target.host, target.port)
        return await asyncio.wait_for(conn, timeout)
    except (OSError, asyncio.TimeoutError) as exc:
        raise TargetConnectionError(target.raw, _describe(exc)) from exc


@contextlib.asynccontextmanager
async def _open_socket(target: Target, timeout: float) -> AsyncIterator[AsyncIterator[bytes]]:
    reader, writer = await _dial(target, timeout)
    try:
        async with contextlib.aclosing(_socket_chunks(reader, target)) as chunks:
            yield chunks
    finally:
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()


@contextlib.asynccontextmanager
async def _open_http(
    target: Target,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> AsyncIterator[AsyncIterator[bytes]]:
    limits = httpx.Timeout(timeout, read=RESPONSE_HEADER_TIMEOUT)
    async with httpx.AsyncClient(timeout=limits, transport=transport) as client:
        request = client.build_request("GET", target.url)
        try:
            response = await asyncio.wait_for(
                client.send(request, stream=True), REQUEST_TIMEOUT
            )
        except (httpx.HTTPError, OSError, asyncio.TimeoutError) as exc:
            raise TargetConnectionError(target.raw, _describe(exc)) from exc

        try:
            if response.is_error:
                raise TargetConnectionError(
                    target.raw, f"HTTP {response.status_code} {response.reason_phrase}"
                )
            async with contextlib.aclosing(_http_chunks(response, target)) as chunks:
                yield chunks
        finally:
            await response.aclose()


@contextlib.asynccontextmanager
async def open_stream(
    target: Target | str,
    timeout: float = DIAL_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[AsyncIterator[bytes]]:
    """Connect to a stats server and yield its body as chunks of bytes.

    Args:
        target: A parsed Target or the raw configured string.
        timeout: Dial timeout in seconds.
        transport: Optional httpx transport for HTTP targets.

    Raises:
        TargetParseError: ``target`` is a string that is not a valid url.
        TargetConnectionError: The dial or HTTP request failed.
    """
    if isinstance(target, str):
        target = parse_target(target)

    logger.debug("opening %s stream to %s", target.scheme.value, target)
    if target.scheme is Scheme.HTTP:
        opener = _open_http(target, timeout, transport)
    else:
        opener = _open_socket(target, timeout)
    async with opener as chunks:
        yield chunks
