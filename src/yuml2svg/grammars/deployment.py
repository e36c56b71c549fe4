"""Deployment diagram grammar.

    [Web Server]->[component:Nginx]
    [Web Server]https-.->[App Server]
    [note: DMZ{bg:wheat}]-[Web Server]
"""

from __future__ import annotations

import re
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

_COMPONENT_RE = re.compile(r"^component\s*:\s*(.*)$", re.IGNORECASE)


def _node(token: Token, registry: NodeRegistry) -> DocNode:
    text, fill = extract_style(token.text)
    note = note_text(text)
    if note is not None:
        return registry.add(f"note:{note}", lambda node_id: note_node(node_id, note, fill))
    m = _COMPONENT_RE.match(text)
    if m is not None:
        name = m.group(1).strip()
        return registry.add(f"component:{name}", lambda node_id: DocNode(node_id, name, NodeShape.Component, fill=fill))
    return registry.add(f"node:{text}", lambda node_id: DocNode(node_id, text, NodeShape.Box3D, fill=fill))


class DeploymentGrammar:
    """Deployment diagram grammar."""

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
