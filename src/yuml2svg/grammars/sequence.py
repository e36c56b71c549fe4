"""Sequence diagram grammar.

    [Patron]order food>[Waiter]
    [Waiter]order food>>[Cook]
    [Cook]pickup.>[Waiter]

``>`` is a synchronous call, ``>>`` an asynchronous one and ``.>`` a reply.
Unlike the other grammars this one paints the final SVG itself; the result
skips header wrapping and image post-processing.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass

from yuml2svg.config import RenderOptions
from yuml2svg.grammars.common import chain, extract_style, split_line
from yuml2svg.layout.types import Point
from yuml2svg.renderers.svg import DASH, PAD_X, PAD_Y, SVG_NS, TextStyle, fmt, paint_arrow, paint_text
from yuml2svg.theme import palette_for
from yuml2svg.types import ArrowKind

MARGIN: float = 10.0
COLUMN_GAP: float = 40.0
MIN_BOX_WIDTH: float = 60.0
MESSAGE_STEP: float = 30.0
SELF_LOOP: float = 30.0


@dataclass
class Participant:
    name: str
    fill: str | None = None
    x: float = 0.0
    width: float = 0.0


@dataclass
class Message:
    sender: str
    receiver: str
    text: str
    kind: str  # "sync", "async" or "reply"


def parse_message(connector: str | None) -> tuple[str, str]:
    """Return (text, kind) for connector text such as ``order food>>``."""
    body = (connector or "").strip()
    if body.endswith(">>"):
        return body[:-2].strip(), "async"
    if body.endswith(".>"):
        return body[:-2].strip(), "reply"
    if body.endswith(">"):
        return body[:-1].strip(), "sync"
    return body, "sync"


class SequenceGrammar:
    """Sequence diagram grammar."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> str:
        participants: dict[str, Participant] = {}
        messages: list[Message] = []

        def participant(text: str) -> Participant:
            name, fill = extract_style(text)
            if name not in participants:
                participants[name] = Participant(name=name, fill=fill)
            return participants[name]

        for line in instructions:
            tokens = split_line(line, "[")
            for token in tokens:
                if token.is_node:
                    participant(token.text)
            for sender, connector, receiver in chain(tokens):
                text, kind = parse_message(connector)
                messages.append(Message(participant(sender.text).name, participant(receiver.text).name, text, kind))

        return _paint(list(participants.values()), messages, options.is_dark)


def _paint(participants: list[Participant], messages: list[Message], is_dark: bool) -> str:
    palette = palette_for(is_dark)
    text = TextStyle(font=palette.font, size=float(palette.font_size), color=palette.ink)
    box_height = text.line_height + 2 * PAD_Y

    x = MARGIN
    for p in participants:
        p.width = max(MIN_BOX_WIDTH, text.block_size(p.name)[0] + 2 * PAD_X)
        p.x = x
        x += p.width + COLUMN_GAP
    centre = {p.name: p.x + p.width / 2 for p in participants}

    top = MARGIN + box_height + MESSAGE_STEP
    bottom = top + max(len(messages) - 1, 0) * MESSAGE_STEP + MESSAGE_STEP
    for m in messages:
        if m.sender == m.receiver:
            bottom += SELF_LOOP / 2
    width = max(x - COLUMN_GAP + MARGIN, MARGIN * 2) + SELF_LOOP
    height = bottom + MARGIN

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{fmt(width)}pt",
            "height": f"{fmt(height)}pt",
            "viewBox": f"0 0 {fmt(width)} {fmt(height)}",
        },
    )
    g = ET.SubElement(root, "g", {"class": "sequence"})

    for p in participants:
        ET.SubElement(
            g,
            "rect",
            {
                "x": fmt(p.x),
                "y": fmt(MARGIN),
                "width": fmt(p.width),
                "height": fmt(box_height),
                "fill": p.fill or "none",
                "stroke": palette.ink,
            },
        )
        paint_text(g, centre[p.name], MARGIN + PAD_Y, p.name, text)
        ET.SubElement(
            g,
            "line",
            {
                "x1": fmt(centre[p.name]),
                "y1": fmt(MARGIN + box_height),
                "x2": fmt(centre[p.name]),
                "y2": fmt(bottom),
                "stroke": palette.ink,
                "stroke-dasharray": DASH,
            },
        )

    y = top
    for m in messages:
        start, end = centre[m.sender], centre[m.receiver]
        head = ArrowKind.Filled if m.kind == "sync" else ArrowKind.Open
        if start == end:
            pts = [Point(start, y), Point(start + SELF_LOOP, y), Point(start + SELF_LOOP, y + SELF_LOOP / 2), Point(start, y + SELF_LOOP / 2)]
        else:
            pts = [Point(start, y), Point(end, y)]
        attrs = {
            "d": "M" + " L".join(f"{fmt(p.x)},{fmt(p.y)}" for p in pts),
            "fill": "none",
            "stroke": palette.ink,
        }
        if m.kind == "reply":
            attrs["stroke-dasharray"] = DASH
        ET.SubElement(g, "path", attrs)
        paint_arrow(g, pts[-2], pts[-1], head, palette.ink)
        if m.text:
            label_x = start + SELF_LOOP + 4 if start == end else (start + end) / 2
            anchor = "start" if start == end else "middle"
            paint_text(g, label_x, y - text.line_height - 2, m.text, text, anchor=anchor)
        y += MESSAGE_STEP + (SELF_LOOP / 2 if start == end else 0)

    return ET.tostring(root, encoding="unicode")
