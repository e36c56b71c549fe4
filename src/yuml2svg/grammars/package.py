"""Package diagram grammar.

    [Core]<-[Web]
    [Web]-.->[Templates{bg:lightblue}]
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
    parse_simple_connector,
    split_line,
)
from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.types import NodeShape


def _node(token: Token, registry: NodeRegistry) -> DocNode:
    text, fill = extract_style(token.text)
    note = note_text(text)
    if note is not None:
        return registry.add(f"note:{note}", lambda node_id: note_node(node_id, note, fill))
    return registry.add(text, lambda node_id: DocNode(node_id, text, NodeShape.Tab, fill=fill))


class PackageGrammar:
    """Package diagram grammar."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> GraphDocument:
        doc = GraphDocument(direction=options.direction)
        registry = NodeRegistry(doc)
        for line in instructions:
            tokens = split_line(line, "[")
            for token in tokens:
                if token.is_node:
                    _node(token, registry)
            for tail, connector, head in chain(tokens):
                conn = parse_simple_connector(connector)
                doc.add_edge(
                    DocEdge(
                        _node(tail, registry).id,
                        _node(head, registry).id,
                        style=conn.style,
                        arrow_head=conn.arrow_head,
                        arrow_tail=conn.arrow_tail,
                        label=conn.label,
                    )
                )
        return doc
