"""Tests for the buffered and streaming input adapters."""

from __future__ import annotations

import io

import pytest

from yuml2svg.ingest.source import feed_buffer, feed_stream, is_stream


class AsyncReader:
    """Minimal stream whose ``read`` is a coroutine, like aiofiles handles."""

    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    async def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)


class FailingReader:
    def __init__(self) -> None:
        self.calls = 0

    def read(self, n: int = -1) -> bytes:
        self.calls += 1
        if self.calls > 1:
            raise OSError("device unplugged")
        return b"[A]\n[B"


def collect_buffer(payload) -> list[str]:
    lines: list[str] = []
    feed_buffer(payload, lines.append)
    return lines


async def collect_stream(stream, chunk_size: int = 4) -> list[str]:
    lines: list[str] = []
    await feed_stream(stream, lines.append, chunk_size=chunk_size)
    return lines


def test_is_stream() -> None:
    assert is_stream(io.StringIO("x"))
    assert is_stream(AsyncReader(b"x"))
    assert not is_stream("x")
    assert not is_stream(b"x")
    assert not is_stream(bytearray(b"x"))


def test_feed_buffer_splits_on_each_separator() -> None:
    assert collect_buffer("a\r\nb\rc\nd") == ["a", "", "b", "c", "d"]


def test_feed_buffer_decodes_bytes() -> None:
    assert collect_buffer("[Café]\n[Ü]".encode()) == ["[Café]", "[Ü]"]


def test_feed_buffer_keeps_trailing_empty_line() -> None:
    assert collect_buffer("a\n") == ["a", ""]


@pytest.mark.asyncio
async def test_stream_matches_buffer_for_crlf() -> None:
    text = "// {type:class}\r\n[A]->[B]\r\n\r\n[B]->[C]\n"
    assert await collect_stream(io.StringIO(text)) == collect_buffer(text)


@pytest.mark.asyncio
@pytest.mark.parametrize("chunk_size", [1, 2, 3, 5, 64])
async def test_stream_decodes_multibyte_across_chunks(chunk_size: int) -> None:
    text = "[Käse]->[Brötchen]\n[€uro]"
    lines = await collect_stream(io.BytesIO(text.encode("utf-8")), chunk_size=chunk_size)
    assert lines == ["[Käse]->[Brötchen]", "[€uro]"]


@pytest.mark.asyncio
async def test_stream_with_async_read() -> None:
    lines = await collect_stream(AsyncReader(b"[A]\n[B]\n[C]"), chunk_size=2)
    assert lines == ["[A]", "[B]", "[C]"]


@pytest.mark.asyncio
async def test_stream_empty_input_yields_single_empty_line() -> None:
    assert await collect_stream(io.BytesIO(b"")) == collect_buffer("") == [""]


@pytest.mark.asyncio
async def test_stream_read_error_propagates() -> None:
    with pytest.raises(OSError, match="device unplugged"):
        await collect_stream(FailingReader())


@pytest.mark.asyncio
async def test_stream_invalid_utf8_propagates() -> None:
    with pytest.raises(UnicodeDecodeError):
        await collect_stream(io.BytesIO(b"[A]\n\xff\xfe"))
