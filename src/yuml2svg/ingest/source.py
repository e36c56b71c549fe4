"""Input adapter: turn buffered or streaming input into a sequence of lines.

Both paths split on every carriage return or line feed, exactly like
``re.split(r"\\r|\\n", text)``, so a CRLF pair yields an empty line in
between. The line handler is called synchronously, one line at a time, in
source order.
"""

from __future__ import annotations

import codecs
import inspect
import re
from collections.abc import Callable
from typing import Any

LineHandler = Callable[[str], None]

CHUNK_SIZE: int = 64 * 1024
_LINE_SPLIT_RE = re.compile(r"\r|\n")


def is_stream(source: Any) -> bool:
    """True if ``source`` exposes an incremental ``read`` capability."""
    return not isinstance(source, (str, bytes, bytearray)) and callable(getattr(source, "read", None))


def feed_buffer(payload: str | bytes | bytearray, handle_line: LineHandler) -> None:
    """Split a fully materialized payload and hand every line to ``handle_line``."""
    text = bytes(payload).decode("utf-8") if isinstance(payload, (bytes, bytearray)) else str(payload)
    for line in _LINE_SPLIT_RE.split(text):
        handle_line(line)


async def feed_stream(stream: Any, handle_line: LineHandler, chunk_size: int = CHUNK_SIZE) -> None:
    """Read ``stream`` chunk by chunk and hand every line to ``handle_line``.

    ``stream.read(n)`` may be a plain method (file objects) or a coroutine
    (``asyncio.StreamReader``, ``aiofiles`` handles) and may return ``str`` or
    ``bytes``. Bytes are decoded incrementally as UTF-8. The trailing partial
    line of each chunk is held back until the next separator or end of input.
    Read and decode errors propagate unchanged.
    """
    decoder = codecs.getincrementaldecoder("utf-8")()
    pending = ""
    while True:
        chunk = stream.read(chunk_size)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        if not chunk:
            break
        if isinstance(chunk, (bytes, bytearray)):
            chunk = decoder.decode(bytes(chunk))
        pending += chunk
        *complete, pending = _LINE_SPLIT_RE.split(pending)
        for line in complete:
            handle_line(line)
    pending += decoder.decode(b"", final=True)
    for line in _LINE_SPLIT_RE.split(pending):
        handle_line(line)
