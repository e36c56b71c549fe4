"""Use case diagram grammar.

    [Customer]-(Make Cup of Tea)
    (Make Cup of Tea)<(Add Milk)
    (Make Cup of Tea)>(Boil Water)
    [Cook]^[Chef]
"""

from __future__ import annotations

from collections.abc import Sequence

from yuml2svg.config import RenderOptions
from yuml2svg.grammars.common import NodeRegistry, Token, chain, extract_style, note_node, note_text, split_line
from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.types import ArrowKind, LineStyle, NodeShape

EXTEND_LABEL = "<<extend>>"
INCLUDE_LABEL = "<<include>>"


def _node(token: Token, registry: NodeRegistry) -> DocNode:
    text, fill = extract_style(token.text)
    note = note_text(text)
    if note is not None:
        return registry.add(f"note:{note}", lambda node_id: note_node(node_id, note, fill))
    if token.opener == "[":
        return registry.add(f"actor:{text}", lambda node_id: DocNode(node_id, text, NodeShape.Actor))
    return registry.add(f"case:{text}", lambda node_id: DocNode(node_id, text, NodeShape.Ellipse, fill=fill))


def _edge(tail: str, head: str, connector: str | None) -> DocEdge:
    body = (connector or "").strip()
    if "^" in body:
        return DocEdge(tail, head, arrow_tail=ArrowKind.Triangle)
    if "<" in body:
        return DocEdge(tail, head, style=LineStyle.Dashed, arrow_tail=ArrowKind.Open, label=EXTEND_LABEL)
    if ">" in body:
        return DocEdge(tail, head, style=LineStyle.Dashed, arrow_head=ArrowKind.Open, label=INCLUDE_LABEL)
    label = body.strip("- ") or None
    return DocEdge(tail, head, label=label)


class UseCaseGrammar:
    """Use case diagram grammar."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> GraphDocument:
        doc = GraphDocument(direction=options.direction)
        registry = NodeRegistry(doc)
        for line in instructions:
            tokens = split_line(line, "[(")
            for token in tokens:
                if token.is_node:
                    _node(token, registry)
            for tail, connector, head in chain(tokens):
                doc.add_edge(_edge(_node(tail, registry).id, _node(head, registry).id, connector))
        return doc
