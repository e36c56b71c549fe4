"""Intermediate representation: graph-description document and GraphIR."""

from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument, Header
from yuml2svg.ir.graph import EdgeData, GraphIR, NodeData

__all__ = [
    "DocEdge",
    "DocNode",
    "EdgeData",
    "GraphDocument",
    "GraphIR",
    "Header",
    "NodeData",
]
