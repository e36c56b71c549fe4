"""Diagram router and assembly pipeline.

``render`` runs a single ingestion pass over the input (directives and
instructions interleaved), freezes the configuration, dispatches to the
grammar for the diagram type and assembles the final SVG:

    Ingest -> Empty | Validate -> Dispatch -> sequence | Wrap -> Render -> PostProcess
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from yuml2svg.config import OptionsBuilder, OptionsLike, RenderOptions
from yuml2svg.grammars import get_grammar
from yuml2svg.ingest import LineCollector, feed_buffer, feed_stream, is_stream
from yuml2svg.ir.document import GraphDocument
from yuml2svg.renderers.images import load_image_processor
from yuml2svg.renderers.svg import render_document
from yuml2svg.theme import wrap_document
from yuml2svg.types import DiagramType

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = '<svg xmlns="http://www.w3.org/2000/svg"/>'


async def _render_branch(
    document: GraphDocument,
    options: RenderOptions,
    engine_options: Mapping[str, Any] | None,
    render_options: Mapping[str, Any] | None,
) -> str:
    themed = wrap_document(document, options.is_dark, options.header_overrides)
    return await render_document(themed, engine_options, render_options)


async def assemble(
    document: GraphDocument,
    options: RenderOptions,
    engine_options: Mapping[str, Any] | None = None,
    render_options: Mapping[str, Any] | None = None,
) -> str:
    """Render ``document`` while the image processor loads, then post-process.

    Either branch failing fails the whole render; no partial result is kept.
    The first error propagates once the sibling branch has been cancelled and
    collected.
    """
    tasks = [
        asyncio.create_task(_render_branch(document, options, engine_options, render_options)),
        asyncio.create_task(load_image_processor()),
    ]
    try:
        svg, processor = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return processor.process(svg, options.is_dark)


async def render(
    input: Any,
    options: OptionsLike = None,
    engine_options: Mapping[str, Any] | None = None,
    render_options: Mapping[str, Any] | None = None,
) -> str:
    """Render yUML text to an SVG document.

    Args:
        input: yUML source as ``str``/``bytes``, or any object with a
            ``read(n)`` method (sync or async, returning ``str`` or ``bytes``).
        options: caller defaults (``dir``, ``type``, ``isDark``,
            ``dotHeaderOverrides``, ``generate``); directives in the input win.
        engine_options: layout spacing (``h_gap``, ``v_gap``).
        render_options: renderer selection (``engine``, ``format``).

    Returns:
        The SVG document. Input without instructions yields an empty ``<svg/>``.

    Raises:
        MissingTypeDirective: if no diagram type is configured.
        InvalidDiagramType: if the diagram type is unknown.
    """
    collector = LineCollector(OptionsBuilder.from_options(options))
    if is_stream(input):
        await feed_stream(input, collector)
    else:
        feed_buffer(input, collector)

    if not collector.instructions:
        return EMPTY_DOCUMENT

    resolved = collector.options.freeze()
    logger.debug(
        "Rendering %d instruction(s) as %s diagram (%s)",
        len(collector.instructions),
        resolved.diagram_type.value,
        resolved.direction.value,
    )
    grammar = get_grammar(resolved.diagram_type)
    result = grammar.parse(tuple(collector.instructions), resolved)
    if resolved.diagram_type == DiagramType.Sequence:
        return result
    return await assemble(result, resolved, engine_options, render_options)


def render_sync(
    input: Any,
    options: OptionsLike = None,
    engine_options: Mapping[str, Any] | None = None,
    render_options: Mapping[str, Any] | None = None,
) -> str:
    """Blocking wrapper around :func:`render` for callers without an event loop."""
    return asyncio.run(render(input, options, engine_options, render_options))
