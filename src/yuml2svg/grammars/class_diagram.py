"""Class diagram grammar.

    [Customer|name;email|login()]<>1-orders 0..*>[Order]
    [Animal]^-[Dog]
    [note: Aggregate root{bg:cornsilk}]-.-[Order]
"""

from __future__ import annotations

from collections.abc import Sequence

from yuml2svg.config import RenderOptions
from yuml2svg.grammars.common import (
    Connector,
    NodeRegistry,
    Token,
    chain,
    extract_style,
    note_node,
    note_text,
    split_line,
)
from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.types import ArrowKind, LineStyle, NodeShape

# Longest markers first so "<>" is not read as "<".
_TAIL_MARKERS: list[tuple[str, ArrowKind]] = [
    ("<>", ArrowKind.Diamond),
    ("++", ArrowKind.FilledDiamond),
    ("^", ArrowKind.Triangle),
    ("<", ArrowKind.Open),
]
_HEAD_MARKERS: list[tuple[str, ArrowKind]] = [
    ("<>", ArrowKind.Diamond),
    ("++", ArrowKind.FilledDiamond),
    ("^", ArrowKind.Triangle),
    (">", ArrowKind.Open),
]


def parse_class_connector(text: str | None) -> Connector:
    """Parse an association such as ``<>1-orders 0..*>`` or ``-.->``."""
    conn = Connector()
    if not text:
        return conn
    body = text.strip()
    for marker, kind in _TAIL_MARKERS:
        if body.startswith(marker):
            conn.arrow_tail = kind
            body = body[len(marker) :]
            break
    for marker, kind in _HEAD_MARKERS:
        if body.endswith(marker):
            conn.arrow_head = kind
            body = body[: -len(marker)]
            break

    if "-.-" in body:
        conn.style = LineStyle.Dashed
        left, _, right = body.partition("-.-")
    else:
        left, _, right = body.partition("-")
    conn.tail_label = left.strip() or None
    conn.head_label = right.strip() or None
    return conn


def _record(token: Token, registry: NodeRegistry) -> DocNode:
    text, fill = extract_style(token.text)
    note = note_text(text)
    if note is not None:
        return registry.add(f"note:{note}", lambda node_id: note_node(node_id, note, fill))

    fields = [part.strip().replace(";", "\n") for part in text.split("|")]
    name = fields[0]
    node = registry.add(
        name,
        lambda node_id: DocNode(
            id=node_id,
            label=name,
            shape=NodeShape.Record,
            fields=fields if len(fields) > 1 else [],
            fill=fill,
        ),
    )
    # A bare [Name] reference never erases compartments; a fuller
    # definition seen later fills in a node first met as a bare reference.
    if len(fields) > 1 and not node.fields:
        node.fields = fields
    if fill and not node.fill:
        node.fill = fill
    return node


class ClassDiagramGrammar:
    """Class diagram grammar."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> GraphDocument:
        doc = GraphDocument(direction=options.direction)
        registry = NodeRegistry(doc)
        for line in instructions:
            tokens = split_line(line, "[")
            for token in tokens:
                if token.is_node:
                    _record(token, registry)
            for tail, connector, head in chain(tokens):
                conn = parse_class_connector(connector)
                doc.add_edge(
                    DocEdge(
                        tail=_record(tail, registry).id,
                        head=_record(head, registry).id,
                        style=conn.style,
                        arrow_head=conn.arrow_head,
                        arrow_tail=conn.arrow_tail,
                        head_label=conn.head_label,
                        tail_label=conn.tail_label,
                    )
                )
        return doc
