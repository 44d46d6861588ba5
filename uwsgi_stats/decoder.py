"""Best-effort decoding of the stats server's JSON document."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable
from typing import Any

from .models import StatsSnapshot

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()

_WHITESPACE = frozenset(b" \t\r\n")
_OPEN = frozenset(b"{[")
_CLOSE = frozenset(b"}]")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")


class _DocumentScanner:
    """Finds where the first top-level object or array ends.

    Only the bytes appended since the previous call are scanned. The
    structural characters are all ASCII, so scanning raw UTF-8 is safe.
    """

    def __init__(self) -> None:
        self.offset = 0
        self.depth = 0
        self.started = False
        self.in_string = False
        self.escaped = False
        self.gave_up = False  # top-level value is not a container

    def feed(self, buffer: bytearray) -> int | None:
        """Return the end index of the first document once it is complete."""
        if self.gave_up:
            return None
        for i in range(self.offset, len(buffer)):
            ch = buffer[i]
            if self.in_string:
                if self.escaped:
                    self.escaped = False
                elif ch == _BACKSLASH:
                    self.escaped = True
                elif ch == _QUOTE:
                    self.in_string = False
                continue
            if not self.started:
                if ch in _WHITESPACE:
                    continue
                if ch not in _OPEN:
                    self.gave_up = True
                    return None
                self.started = True
            if ch == _QUOTE:
                self.in_string = True
            elif ch in _OPEN:
                self.depth += 1
            elif ch in _CLOSE:
                self.depth -= 1
                if self.depth == 0:
                    return i + 1
        self.offset = len(buffer)
        return None


def _try_decode(data: bytes | bytearray) -> tuple[bool, Any]:
    text = data.decode("utf-8", errors="replace").lstrip()
    try:
        value, _ = _decoder.raw_decode(text)
    except json.JSONDecodeError:
        return False, None
    return True, value


async def read_document(chunks: AsyncIterable[bytes]) -> Any | None:
    """Return the first JSON document in ``chunks``, or None.

    Reading stops as soon as the first document is complete, so any trailing
    bytes are never waited for. Empty, truncated or malformed input gives
    None rather than an error.
    """
    buffer = bytearray()
    scanner = _DocumentScanner()
    async for chunk in chunks:
        if not chunk:
            continue
        buffer.extend(chunk)
        end = scanner.feed(buffer)
        if end is not None:
            done, value = _try_decode(buffer[:end])
            if not done:
                logger.debug("discarding malformed stats document (%d bytes)", end)
                return None
            return value

    if not buffer.strip():
        logger.debug("stats server sent an empty document")
        return None
    # Truncated containers and bare scalars end up here.
    done, value = _try_decode(buffer)
    if not done:
        logger.debug("discarding malformed stats document (%d bytes)", len(buffer))
        return None
    return value


async def decode_snapshot(chunks: AsyncIterable[bytes]) -> StatsSnapshot:
    document = await read_document(chunks)
    if not isinstance(document, dict):
        return StatsSnapshot()
    return StatsSnapshot.from_dict(document)
