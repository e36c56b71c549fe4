"""State diagram grammar.

    (start)->(Idle)
    (Idle)coin->(Ready)
    (Ready)[push]->(Idle)->(end)
"""

from __future__ import annotations

from collections.abc import Sequence

from yuml2svg.config import RenderOptions
from yuml2svg.grammars.common import (
    NodeRegistry,
    Token,
    chain,
    extract_style,
    note_node,
    note_text,
    parse_transition,
    split_line,
)
from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.types import NodeShape


def _node(token: Token, registry: NodeRegistry) -> DocNode:
    text, fill = extract_style(token.text)
    note = note_text(text)
    if note is not None:
        return registry.add(f"note:{note}", lambda node_id: note_node(node_id, note, fill))
    if text == "start":
        return registry.add("start", lambda node_id: DocNode(node_id, "", NodeShape.Start))
    if text == "end":
        return registry.add("end", lambda node_id: DocNode(node_id, "", NodeShape.End))
    return registry.add(f"state:{text}", lambda node_id: DocNode(node_id, text, NodeShape.Rounded, fill=fill))


class StateGrammar:
    """State diagram grammar."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> GraphDocument:
        doc = GraphDocument(direction=options.direction)
        registry = NodeRegistry(doc)
        for line in instructions:
            tokens = split_line(line, "(")
            for token in tokens:
                if token.is_node:
                    _node(token, registry)
            for tail, connector, head in chain(tokens):
                conn = parse_transition(connector)
                doc.add_edge(
                    DocEdge(
                        _node(tail, registry).id,
                        _node(head, registry).id,
                        arrow_head=conn.arrow_head,
                        label=conn.label,
                    )
                )
        return doc
