"""Header wrapping: attach light or dark theme defaults to a graph document."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from yuml2svg.ir.document import GraphDocument, Header


@dataclass(frozen=True)
class Palette:
    ink: str
    background: str
    paper: str
    font: str = "Helvetica"
    font_size: str = "10"


LIGHT = Palette(ink="#000000", background="transparent", paper="#ffffff")
DARK = Palette(ink="#e6e6e6", background="transparent", paper="#1e1e1e")


def palette_for(is_dark: bool) -> Palette:
    return DARK if is_dark else LIGHT


def build_header(is_dark: bool, overrides: Mapping[str, Any] | None = None) -> Header:
    """Theme defaults with any ``graph``/``node``/``edge`` overrides merged on top."""
    p = palette_for(is_dark)
    header = Header(
        graph={"bgcolor": p.background, "fontname": p.font, "fontsize": p.font_size},
        node={
            "color": p.ink,
            "fontcolor": p.ink,
            "fillcolor": p.paper,
            "fontname": p.font,
            "fontsize": p.font_size,
        },
        edge={"color": p.ink, "fontcolor": p.ink, "fontname": p.font, "fontsize": p.font_size},
    )
    if overrides:
        for section in ("graph", "node", "edge"):
            extra = overrides.get(section)
            if extra:
                getattr(header, section).update({str(k): str(v) for k, v in extra.items()})
    return header


def wrap_document(
    document: GraphDocument,
    is_dark: bool,
    header_overrides: Mapping[str, Any] | None = None,
) -> GraphDocument:
    """Return a copy of ``document`` carrying the theme header."""
    return replace(document, header=build_header(is_dark, header_overrides))
