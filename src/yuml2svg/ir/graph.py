"""Graph IR: converts a GraphDocument into a networkx DiGraph for layout.

The DiGraph carries the topology used for layering and ordering. Parallel
edges between the same pair of nodes collapse into one DiGraph edge, while
every document edge is kept in ``edges`` so the renderer can draw them all.
"""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.types import Direction, NodeShape


@dataclass
class NodeData:
    id: str
    label: str
    shape: NodeShape
    width: float
    height: float


@dataclass
class EdgeData:
    index: int
    edge: DocEdge


class GraphIR:
    """The graph intermediate representation built from a GraphDocument."""

    def __init__(self, digraph: nx.DiGraph, direction: Direction, edges: list[EdgeData]) -> None:
        self.digraph = digraph
        self.direction = direction
        self.edges = edges

    @classmethod
    def from_document(cls, doc: GraphDocument, sizes: dict[str, tuple[float, float]]) -> GraphIR:
        """Build a GraphIR; ``sizes`` maps node id to its (width, height) in pixels."""
        digraph: nx.DiGraph = nx.DiGraph()
        for node in doc.nodes:
            _add_node(digraph, node, sizes)

        edges: list[EdgeData] = []
        for index, edge in enumerate(doc.edges):
            _ensure_node(digraph, edge.tail, sizes)
            _ensure_node(digraph, edge.head, sizes)
            data = EdgeData(index=index, edge=edge)
            edges.append(data)
            if digraph.has_edge(edge.tail, edge.head):
                digraph.edges[edge.tail, edge.head]["data"].append(data)
            else:
                digraph.add_edge(edge.tail, edge.head, data=[data])

        return cls(digraph=digraph, direction=doc.direction, edges=edges)

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self.digraph)

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        return len(self.edges)

    def node_data(self, node_id: str) -> NodeData:
        return self.digraph.nodes[node_id]["data"]


def _add_node(digraph: nx.DiGraph, node: DocNode, sizes: dict[str, tuple[float, float]]) -> None:
    if node.id in digraph:
        return
    width, height = sizes.get(node.id, (0.0, 0.0))
    digraph.add_node(node.id, data=NodeData(node.id, node.label, node.shape, width, height))


def _ensure_node(digraph: nx.DiGraph, node_id: str, sizes: dict[str, tuple[float, float]]) -> None:
    if node_id not in digraph:
        _add_node(digraph, DocNode(id=node_id, label=node_id), sizes)
