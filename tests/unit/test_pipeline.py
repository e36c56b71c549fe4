"""Tests for the router and the assembly pipeline."""

from __future__ import annotations

import asyncio
import io
import logging
import xml.etree.ElementTree as ET

import pytest

from yuml2svg import pipeline
from yuml2svg.config import RenderOptions
from yuml2svg.errors import InvalidDiagramType, MissingTypeDirective, RenderError
from yuml2svg.grammars import GRAMMARS
from yuml2svg.grammars.sequence import SequenceGrammar
from yuml2svg.pipeline import EMPTY_DOCUMENT, render, render_sync
from yuml2svg.types import DiagramType

CLASS_SOURCE = "// {type:class}\n[Customer]<>1-orders 0..*>[Order]\n[Order]-[Product]\n"


class AsyncBytesReader:
    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    async def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)


# ─── Empty input ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("source", ["", "\n\n", "// {type:sequence}\n   \n// comment", b"\r\n"])
async def test_empty_input(source) -> None:
    assert await render(source) == EMPTY_DOCUMENT


@pytest.mark.asyncio
async def test_empty_input_ignores_options() -> None:
    assert await render("", {"type": "flowchart", "isDark": True}) == EMPTY_DOCUMENT
    assert await render(io.StringIO("")) == EMPTY_DOCUMENT


# ─── Validation ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_unknown_caller_type_is_rejected() -> None:
    with pytest.raises(InvalidDiagramType, match="Invalid diagram type"):
        await render("[A]->[B]", {"type": "flowchart"})


@pytest.mark.asyncio
async def test_directive_rescues_unknown_caller_type() -> None:
    svg = await render("// {type:class}\n[A]->[B]", {"type": "flowchart"})
    assert svg.startswith("<svg")


@pytest.mark.asyncio
async def test_missing_type_is_rejected() -> None:
    with pytest.raises(MissingTypeDirective):
        await render("[A]", RenderOptions(diagram_type=None))  # type: ignore[arg-type]


# ─── Dispatch ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_class_diagram_renders_svg() -> None:
    svg = await render(CLASS_SOURCE)
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert ">Customer<" in svg
    assert ">orders 0..*<" in svg


@pytest.mark.asyncio
async def test_usecase_actor_is_inlined() -> None:
    svg = await render("[User]-(Login)", {"type": "usecase"})
    assert "yuml:actor" not in svg
    assert "<circle" in svg


@pytest.mark.asyncio
async def test_sequence_bypasses_wrap_and_post_processing(monkeypatch: pytest.MonkeyPatch) -> None:
    async def unexpected(*args, **kwargs):
        raise AssertionError("assembly must not run for sequence diagrams")

    monkeypatch.setattr(pipeline, "load_image_processor", unexpected)
    monkeypatch.setattr(pipeline, "render_document", unexpected)
    source = "// {type:sequence}\n[A]hello>[B]\n[B]bye.>[A]"
    expected = SequenceGrammar().parse(
        ("[A]hello>[B]", "[B]bye.>[A]"), RenderOptions(diagram_type=DiagramType.Sequence)
    )
    assert await render(source) == expected


@pytest.mark.asyncio
async def test_grammar_receives_collected_instructions(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    class Recorder:
        def parse(self, instructions, options):
            seen["instructions"] = instructions
            seen["options"] = options
            return "<svg/>"

    monkeypatch.setitem(GRAMMARS, DiagramType.Sequence, Recorder())
    result = await render("// {type:sequence}\n  [A]x>[B]  \n\n// {direction:leftToRight}\n[B]y>[A]", {"isDark": True})
    assert result == "<svg/>"
    assert seen["instructions"] == ("[A]x>[B]", "[B]y>[A]")
    assert seen["options"].is_dark is True
    assert seen["options"].direction.value == "LR"


# ─── Assembly ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_render_branch_failure_propagates() -> None:
    with pytest.raises(RenderError):
        await render(CLASS_SOURCE, render_options={"engine": "circo"})


@pytest.mark.asyncio
async def test_image_branch_failure_propagates(monkeypatch: pytest.MonkeyPatch) -> None:
    async def broken():
        raise OSError("assets missing")

    monkeypatch.setattr(pipeline, "load_image_processor", broken)
    with pytest.raises(OSError, match="assets missing"):
        await render(CLASS_SOURCE)


@pytest.mark.asyncio
async def test_dark_theme_changes_output() -> None:
    light = await render(CLASS_SOURCE)
    dark = await render(CLASS_SOURCE, {"isDark": True})
    assert light != dark
    assert "#e6e6e6" in dark


# ─── Equivalence ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("options", [None, {"isDark": True}, {"dir": "LR"}])
async def test_buffered_and_streamed_are_identical(options) -> None:
    buffered = await render(CLASS_SOURCE, options)
    assert await render(io.StringIO(CLASS_SOURCE), options) == buffered
    assert await render(io.BytesIO(CLASS_SOURCE.encode()), options) == buffered
    assert await render(AsyncBytesReader(CLASS_SOURCE.encode()), options) == buffered


@pytest.mark.asyncio
async def test_generate_directive_only_warns(caplog: pytest.LogCaptureFixture) -> None:
    plain = await render(CLASS_SOURCE)
    with caplog.at_level(logging.WARNING):
        with_generate = await render("// {generate:true}\n" + CLASS_SOURCE)
    assert with_generate == plain
    assert "Generate option is not supported" in caplog.text


@pytest.mark.asyncio
async def test_direction_directive_changes_layout() -> None:
    top_down = await render(CLASS_SOURCE)
    left_right = await render("// {direction:leftToRight}\n" + CLASS_SOURCE)
    assert top_down != left_right


def test_render_sync() -> None:
    assert render_sync("") == EMPTY_DOCUMENT
    assert render_sync(CLASS_SOURCE).startswith("<svg")


@pytest.mark.asyncio
async def test_non_string_caller_type_is_rejected() -> None:
    with pytest.raises(InvalidDiagramType, match="Invalid diagram type"):
        await render("[A]->[B]", {"type": 5})


@pytest.mark.asyncio
async def test_failed_render_cancels_and_collects_image_branch(monkeypatch: pytest.MonkeyPatch) -> None:
    state = {}

    async def slow_loader():
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise

    monkeypatch.setattr(pipeline, "load_image_processor", slow_loader)
    with pytest.raises(RenderError):
        await render(CLASS_SOURCE, render_options={"format": "png"})
    assert state == {"cancelled": True}


@pytest.mark.asyncio
async def test_control_characters_do_not_break_the_document() -> None:
    svg = await render("[Us\x0ber]-(Log\x01in)", {"type": "usecase"})
    root = ET.fromstring(svg)
    texts = [t.text for t in root.iter("{http://www.w3.org/2000/svg}text")]
    assert "User" in texts
    assert "Login" in texts
    assert "yuml:actor" not in svg
