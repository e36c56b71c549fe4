"""SVG renderer: lays out a themed GraphDocument and paints it as SVG.

This is the layout-rendering stage of the pipeline. Node sizes come from a
fixed-width font approximation, so output depends only on the document and
the options, never on the host.
"""

from __future__ import annotations

import asyncio
import math
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from yuml2svg.errors import RenderError
from yuml2svg.ir.document import DocNode, GraphDocument, Header
from yuml2svg.ir.graph import GraphIR
from yuml2svg.layout import NODE_GAP, RANK_GAP, full_layout
from yuml2svg.layout.types import LayoutNode, LayoutResult, Point, RoutedEdge
from yuml2svg.theme import LIGHT
from yuml2svg.types import ArrowKind, Direction, LineStyle, NodeShape

SVG_NS = "http://www.w3.org/2000/svg"
IMAGE_SCHEME = "yuml:"

SUPPORTED_ENGINES = ("dot",)
SUPPORTED_FORMATS = ("svg",)

PAD_X: float = 8.0
PAD_Y: float = 4.0
ACTOR_WIDTH: float = 30.0
ACTOR_HEIGHT: float = 40.0
ARROW_LENGTH: float = 10.0
ARROW_HALF_WIDTH: float = 5.0
DASH = "5,3"

# Anything outside the XML 1.0 Char production.
_XML_ILLEGAL_RE = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def fmt(value: float) -> str:
    """Compact, deterministic number formatting for SVG attributes."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def xml_text(text: str) -> str:
    """Drop characters that cannot appear in an XML document (e.g. ``\\x0b``)."""
    return _XML_ILLEGAL_RE.sub("", text)


@dataclass(frozen=True)
class TextStyle:
    font: str
    size: float
    color: str

    @property
    def char_width(self) -> float:
        return self.size * 0.6

    @property
    def line_height(self) -> float:
        return self.size * 1.3

    def block_size(self, text: str) -> tuple[float, float]:
        lines = text.split("\n")
        return (max(len(line) for line in lines) * self.char_width, len(lines) * self.line_height)


@dataclass(frozen=True)
class Style:
    """Resolved drawing style taken from a document header."""

    ink: str
    background: str
    node_text: TextStyle
    edge_ink: str
    edge_text: TextStyle

    @classmethod
    def from_header(cls, header: Header | None) -> Style:
        graph = header.graph if header else {}
        node = header.node if header else {}
        edge = header.edge if header else {}
        ink = node.get("color", LIGHT.ink)
        node_text = TextStyle(
            font=node.get("fontname", LIGHT.font),
            size=float(node.get("fontsize", LIGHT.font_size)),
            color=node.get("fontcolor", ink),
        )
        edge_ink = edge.get("color", ink)
        edge_text = TextStyle(
            font=edge.get("fontname", node_text.font),
            size=float(edge.get("fontsize", node_text.size)),
            color=edge.get("fontcolor", edge_ink),
        )
        return cls(
            ink=ink,
            background=graph.get("bgcolor", LIGHT.background),
            node_text=node_text,
            edge_ink=edge_ink,
            edge_text=edge_text,
        )


# ─── Node Measurement ────────────────────────────────────────────────────────


def measure_node(node: DocNode, text: TextStyle, direction: Direction) -> tuple[float, float]:
    """(width, height) in pixels for a node of the given shape."""
    shape = node.shape
    if shape == NodeShape.Start:
        return (16.0, 16.0)
    if shape == NodeShape.End:
        return (20.0, 20.0)
    if shape == NodeShape.Bar:
        return (6.0, 60.0) if direction in (Direction.LR, Direction.RL) else (60.0, 6.0)
    if shape == NodeShape.Record:
        blocks = [text.block_size(c) for c in node.compartments()]
        width = max(w for w, _ in blocks) + 2 * PAD_X
        height = sum(h + 2 * PAD_Y for _, h in blocks)
        return (width, height)

    tw, th = text.block_size(node.label)
    if shape == NodeShape.Actor:
        return (max(ACTOR_WIDTH, tw), ACTOR_HEIGHT + th + 2)
    width, height = tw + 2 * PAD_X, th + 2 * PAD_Y
    if shape == NodeShape.Ellipse:
        return (width * 1.25, height * 1.5)
    if shape == NodeShape.Diamond:
        return (max(width * 1.5, 30.0), max(height * 1.5, 30.0))
    if shape == NodeShape.Note:
        return (width + 10, height)
    if shape in (NodeShape.Box3D, NodeShape.Component):
        return (width + 12, height + 6)
    if shape == NodeShape.Tab:
        return (width, height + 8)
    return (max(width, 20.0), height)


# ─── Painting helpers ────────────────────────────────────────────────────────


def paint_text(parent: ET.Element, x: float, top: float, text: str, style: TextStyle, anchor: str = "middle") -> None:
    for i, line in enumerate(text.split("\n")):
        baseline = top + i * style.line_height + style.size
        el = ET.SubElement(
            parent,
            "text",
            {
                "x": fmt(x),
                "y": fmt(baseline),
                "font-family": style.font,
                "font-size": fmt(style.size),
                "fill": style.color,
                "text-anchor": anchor,
            },
        )
        el.text = xml_text(line)


def _points(*pts: tuple[float, float]) -> str:
    return " ".join(f"{fmt(x)},{fmt(y)}" for x, y in pts)


def _centered_label(g: ET.Element, ln: LayoutNode, label: str, text: TextStyle) -> None:
    _, th = text.block_size(label)
    paint_text(g, ln.cx, ln.cy - th / 2, label, text)


def _paint_record(g: ET.Element, ln: LayoutNode, node: DocNode, stroke: dict[str, str], text: TextStyle) -> None:
    ET.SubElement(g, "rect", {"x": fmt(ln.x), "y": fmt(ln.y), "width": fmt(ln.width), "height": fmt(ln.height), **stroke})
    top = ln.y
    for i, compartment in enumerate(node.compartments()):
        _, h = text.block_size(compartment)
        if i > 0:
            ET.SubElement(
                g,
                "line",
                {
                    "x1": fmt(ln.x),
                    "y1": fmt(top),
                    "x2": fmt(ln.x + ln.width),
                    "y2": fmt(top),
                    "stroke": stroke["stroke"],
                },
            )
        if i == 0:
            paint_text(g, ln.cx, top + PAD_Y, compartment, text)
        else:
            paint_text(g, ln.x + PAD_X, top + PAD_Y, compartment, text, anchor="start")
        top += h + 2 * PAD_Y


def _paint_node(parent: ET.Element, ln: LayoutNode, node: DocNode, style: Style) -> None:
    g = ET.SubElement(parent, "g", {"class": "node", "id": node.id})
    ET.SubElement(g, "title").text = xml_text(node.label)
    text = style.node_text
    stroke = {"fill": node.fill or "none", "stroke": style.ink}
    x, y, w, h = ln.x, ln.y, ln.width, ln.height
    shape = node.shape

    if shape == NodeShape.Record:
        _paint_record(g, ln, node, stroke, text)
        return
    if shape == NodeShape.Start:
        ET.SubElement(g, "circle", {"cx": fmt(ln.cx), "cy": fmt(ln.cy), "r": fmt(w / 2), "fill": style.ink})
        return
    if shape == NodeShape.End:
        ET.SubElement(g, "circle", {"cx": fmt(ln.cx), "cy": fmt(ln.cy), "r": fmt(w / 2), "fill": "none", "stroke": style.ink})
        ET.SubElement(g, "circle", {"cx": fmt(ln.cx), "cy": fmt(ln.cy), "r": fmt(w / 2 - 4), "fill": style.ink})
        return
    if shape == NodeShape.Bar:
        ET.SubElement(g, "rect", {"x": fmt(x), "y": fmt(y), "width": fmt(w), "height": fmt(h), "fill": style.ink})
        return
    if shape == NodeShape.Actor:
        ET.SubElement(
            g,
            "image",
            {
                "href": f"{IMAGE_SCHEME}actor",
                "x": fmt(ln.cx - ACTOR_WIDTH / 2),
                "y": fmt(y),
                "width": fmt(ACTOR_WIDTH),
                "height": fmt(ACTOR_HEIGHT),
            },
        )
        paint_text(g, ln.cx, y + ACTOR_HEIGHT + 2, node.label, text)
        return

    if shape == NodeShape.Ellipse:
        ET.SubElement(g, "ellipse", {"cx": fmt(ln.cx), "cy": fmt(ln.cy), "rx": fmt(w / 2), "ry": fmt(h / 2), **stroke})
    elif shape == NodeShape.Diamond:
        pts = _points((ln.cx, y), (x + w, ln.cy), (ln.cx, y + h), (x, ln.cy))
        ET.SubElement(g, "polygon", {"points": pts, **stroke})
    elif shape == NodeShape.Note:
        fold = 10.0
        pts = _points((x, y), (x + w - fold, y), (x + w, y + fold), (x + w, y + h), (x, y + h))
        ET.SubElement(g, "polygon", {"points": pts, **stroke})
        corner = _points((x + w - fold, y), (x + w - fold, y + fold), (x + w, y + fold))
        ET.SubElement(g, "polyline", {"points": corner, "fill": "none", "stroke": style.ink})
    elif shape == NodeShape.Box3D:
        depth = 6.0
        top = _points((x, y + depth), (x + depth, y), (x + w, y), (x + w - depth, y + depth))
        side = _points((x + w - depth, y + depth), (x + w, y), (x + w, y + h - depth), (x + w - depth, y + h))
        ET.SubElement(g, "polygon", {"points": top, **stroke})
        ET.SubElement(g, "polygon", {"points": side, **stroke})
        ET.SubElement(
            g, "rect", {"x": fmt(x), "y": fmt(y + depth), "width": fmt(w - depth), "height": fmt(h - depth), **stroke}
        )
    elif shape == NodeShape.Component:
        ET.SubElement(g, "rect", {"x": fmt(x + 6), "y": fmt(y), "width": fmt(w - 6), "height": fmt(h), **stroke})
        for offset in (h / 4, h * 3 / 4 - 6):
            ET.SubElement(
                g, "rect", {"x": fmt(x), "y": fmt(y + offset), "width": "12", "height": "6", **stroke}
            )
    elif shape == NodeShape.Tab:
        tab_w = min(w / 2, 30.0)
        ET.SubElement(g, "rect", {"x": fmt(x), "y": fmt(y), "width": fmt(tab_w), "height": "8", **stroke})
        ET.SubElement(g, "rect", {"x": fmt(x), "y": fmt(y + 8), "width": fmt(w), "height": fmt(h - 8), **stroke})
        _centered_label(g, LayoutNode(ln.id, ln.layer, ln.order, x, y + 8, w, h - 8), node.label, text)
        return
    else:
        attrs = {"x": fmt(x), "y": fmt(y), "width": fmt(w), "height": fmt(h), **stroke}
        if shape == NodeShape.Rounded:
            attrs["rx"] = attrs["ry"] = "10"
        ET.SubElement(g, "rect", attrs)
    _centered_label(g, ln, node.label, text)


# ─── Edges ───────────────────────────────────────────────────────────────────


def _unit(a: Point, b: Point) -> tuple[float, float]:
    dx, dy = b.x - a.x, b.y - a.y
    length = math.hypot(dx, dy) or 1.0
    return (dx / length, dy / length)


def _arrow_length(kind: ArrowKind) -> float:
    if kind in (ArrowKind.Diamond, ArrowKind.FilledDiamond):
        return 2 * ARROW_LENGTH
    if kind in (ArrowKind.Filled, ArrowKind.Triangle):
        return ARROW_LENGTH
    return 0.0


def paint_arrow(g: ET.Element, prev: Point, tip: Point, kind: ArrowKind, color: str) -> None:
    if kind == ArrowKind.None_:
        return
    ux, uy = _unit(prev, tip)
    nx_, ny_ = -uy, ux
    base = (tip.x - ux * ARROW_LENGTH, tip.y - uy * ARROW_LENGTH)
    left = (base[0] + nx_ * ARROW_HALF_WIDTH, base[1] + ny_ * ARROW_HALF_WIDTH)
    right = (base[0] - nx_ * ARROW_HALF_WIDTH, base[1] - ny_ * ARROW_HALF_WIDTH)
    if kind == ArrowKind.Open:
        ET.SubElement(g, "polyline", {"points": _points(left, (tip.x, tip.y), right), "fill": "none", "stroke": color})
    elif kind in (ArrowKind.Filled, ArrowKind.Triangle):
        fill = color if kind == ArrowKind.Filled else "none"
        ET.SubElement(g, "polygon", {"points": _points(left, (tip.x, tip.y), right), "fill": fill, "stroke": color})
    else:
        back = (tip.x - 2 * ux * ARROW_LENGTH, tip.y - 2 * uy * ARROW_LENGTH)
        fill = color if kind == ArrowKind.FilledDiamond else "none"
        pts = _points((tip.x, tip.y), left, back, right)
        ET.SubElement(g, "polygon", {"points": pts, "fill": fill, "stroke": color})


def _pull_back(tip: Point, prev: Point, distance: float) -> Point:
    if distance == 0:
        return tip
    ux, uy = _unit(prev, tip)
    return Point(tip.x - ux * distance, tip.y - uy * distance)


def _midpoint(pts: list[Point]) -> Point:
    mid = len(pts) // 2
    if len(pts) % 2:
        return pts[mid]
    a, b = pts[mid - 1], pts[mid]
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def _end_label(g: ET.Element, tip: Point, prev: Point, label: str, text: TextStyle) -> None:
    ux, uy = _unit(prev, tip)
    x = tip.x - ux * 14 - uy * 8
    y = tip.y - uy * 14 + ux * 8
    paint_text(g, x, y - text.size / 2, label, text)


def _paint_edge(parent: ET.Element, route: RoutedEdge, style: Style) -> None:
    edge = route.data.edge
    pts = list(route.waypoints)
    g = ET.SubElement(parent, "g", {"class": "edge"})
    ET.SubElement(g, "title").text = xml_text(f"{edge.tail}->{edge.head}")

    line = list(pts)
    line[-1] = _pull_back(pts[-1], pts[-2], _arrow_length(edge.arrow_head))
    line[0] = _pull_back(pts[0], pts[1], _arrow_length(edge.arrow_tail))
    attrs = {"d": "M" + " L".join(f"{fmt(p.x)},{fmt(p.y)}" for p in line), "fill": "none", "stroke": style.edge_ink}
    if edge.style == LineStyle.Dashed:
        attrs["stroke-dasharray"] = DASH
    ET.SubElement(g, "path", attrs)

    paint_arrow(g, pts[-2], pts[-1], edge.arrow_head, style.edge_ink)
    paint_arrow(g, pts[1], pts[0], edge.arrow_tail, style.edge_ink)

    if edge.label:
        mid = _midpoint(pts)
        _, th = style.edge_text.block_size(edge.label)
        paint_text(g, mid.x + 4, mid.y - th / 2, edge.label, style.edge_text, anchor="start")
    if edge.head_label:
        _end_label(g, pts[-1], pts[-2], edge.head_label, style.edge_text)
    if edge.tail_label:
        _end_label(g, pts[0], pts[1], edge.tail_label, style.edge_text)


# ─── Document ────────────────────────────────────────────────────────────────


def layout_document(document: GraphDocument, engine_options: Mapping[str, Any] | None = None) -> LayoutResult:
    """Measure and lay out every node of ``document``."""
    options = engine_options or {}
    style = Style.from_header(document.header)
    sizes = {n.id: measure_node(n, style.node_text, document.direction) for n in document.nodes}
    gir = GraphIR.from_document(document, sizes)
    return full_layout(
        gir,
        rank_gap=float(options.get("v_gap", RANK_GAP)),
        node_gap=float(options.get("h_gap", NODE_GAP)),
    )


def paint_document(document: GraphDocument, engine_options: Mapping[str, Any] | None = None) -> str:
    """Synchronously lay out and paint ``document`` as an SVG string."""
    style = Style.from_header(document.header)
    result = layout_document(document, engine_options)
    width, height = result.width, result.height

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{fmt(width)}pt",
            "height": f"{fmt(height)}pt",
            "viewBox": f"0 0 {fmt(width)} {fmt(height)}",
        },
    )
    if style.background != "transparent":
        ET.SubElement(root, "rect", {"width": "100%", "height": "100%", "fill": style.background})

    graph = ET.SubElement(root, "g", {"class": "graph"})
    for route in result.edges:
        _paint_edge(graph, route, style)
    positions = {ln.id: ln for ln in result.nodes}
    for node in document.nodes:
        _paint_node(graph, positions[node.id], node, style)
    for ln in result.nodes:
        if document.node(ln.id) is None:
            _paint_node(graph, ln, DocNode(id=ln.id, label=ln.id), style)

    return ET.tostring(root, encoding="unicode")


def check_render_options(render_options: Mapping[str, Any] | None) -> None:
    if not render_options:
        return
    engine = render_options.get("engine")
    if engine is not None and engine not in SUPPORTED_ENGINES:
        raise RenderError(f"Unsupported layout engine {engine!r}; supported: {', '.join(SUPPORTED_ENGINES)}")
    fmt_ = render_options.get("format")
    if fmt_ is not None and fmt_ not in SUPPORTED_FORMATS:
        raise RenderError(f"Unsupported output format {fmt_!r}; supported: {', '.join(SUPPORTED_FORMATS)}")


async def render_document(
    document: GraphDocument,
    engine_options: Mapping[str, Any] | None = None,
    render_options: Mapping[str, Any] | None = None,
) -> str:
    """Lay out and paint ``document`` off the event loop."""
    check_render_options(render_options)
    return await asyncio.to_thread(paint_document, document, engine_options)
