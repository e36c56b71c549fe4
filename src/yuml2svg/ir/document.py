"""Graph-description document produced by the diagram grammars.

A :class:`GraphDocument` is the intermediate form between a grammar and the
layout renderer: ordered nodes and edges plus graph attributes and, once the
header has been wrapped around it, theme defaults. It can be serialized to
Graphviz DOT for inspection.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from yuml2svg.types import ArrowKind, Direction, LineStyle, NodeShape


@dataclass
class DocNode:
    id: str
    label: str
    shape: NodeShape = field(default_factory=NodeShape.default)
    fields: list[str] = field(default_factory=list)  # record compartments
    fill: str | None = None

    def compartments(self) -> list[str]:
        """Record compartments, or the label as a single compartment."""
        return self.fields if self.fields else [self.label]


@dataclass
class DocEdge:
    tail: str
    head: str
    style: LineStyle = LineStyle.Solid
    arrow_head: ArrowKind = ArrowKind.None_
    arrow_tail: ArrowKind = ArrowKind.None_
    label: str | None = None
    head_label: str | None = None
    tail_label: str | None = None


@dataclass
class Header:
    """Theme defaults for the graph, its nodes and its edges (DOT attribute names)."""

    graph: dict[str, str] = field(default_factory=dict)
    node: dict[str, str] = field(default_factory=dict)
    edge: dict[str, str] = field(default_factory=dict)


@dataclass
class GraphDocument:
    direction: Direction = field(default_factory=Direction.default)
    nodes: list[DocNode] = field(default_factory=list)
    edges: list[DocEdge] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)
    header: Header | None = None

    def add_node(self, node: DocNode) -> DocNode:
        """First-definition-wins: return the existing node when the id is taken."""
        existing = self.node(node.id)
        if existing is not None:
            return existing
        self.nodes.append(node)
        return node

    def add_edge(self, edge: DocEdge) -> DocEdge:
        self.edges.append(edge)
        return edge

    def node(self, node_id: str) -> DocNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dot(self) -> str:
        """Serialize the document as Graphviz DOT text."""
        lines = ["digraph G {"]
        graph_attrs = {"rankdir": self.direction.value, **self.attrs}
        if self.header is not None:
            graph_attrs = {**self.header.graph, **graph_attrs}
        lines.append(f"  graph {_attr_list(graph_attrs)}")
        if self.header is not None and self.header.node:
            lines.append(f"  node {_attr_list(self.header.node)}")
        if self.header is not None and self.header.edge:
            lines.append(f"  edge {_attr_list(self.header.edge)}")
        for n in self.nodes:
            attrs = {"shape": n.shape.value}
            attrs["label"] = "|".join(n.fields) if n.fields else n.label
            if n.fill:
                attrs["style"] = "filled"
                attrs["fillcolor"] = n.fill
            lines.append(f"  {_quote(n.id)} {_attr_list(attrs)}")
        for e in self.edges:
            attrs = {
                "dir": "both",
                "style": e.style.value,
                "arrowhead": e.arrow_head.value,
                "arrowtail": e.arrow_tail.value,
            }
            if e.label:
                attrs["label"] = e.label
            if e.head_label:
                attrs["headlabel"] = e.head_label
            if e.tail_label:
                attrs["taillabel"] = e.tail_label
            lines.append(f"  {_quote(e.tail)} -> {_quote(e.head)} {_attr_list(attrs)}")
        lines.append("}")
        return "\n".join(lines) + "\n"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _attr_list(attrs: dict[str, str]) -> str:
    return "[" + ", ".join(f"{k}={_quote(str(v))}" for k, v in attrs.items()) + "]"
