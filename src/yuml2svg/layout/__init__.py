"""Layout engine public API."""

from __future__ import annotations

from yuml2svg.ir.graph import GraphIR
from yuml2svg.layout.sugiyama import (
    MARGIN,
    NODE_GAP,
    RANK_GAP,
    AugmentedGraph,
    SugiyamaLayout,
    assign_coordinates,
    assign_layers,
    count_crossings,
    greedy_fas_ordering,
    insert_dummy_nodes,
    minimise_crossings,
    remove_cycles,
    route_edges,
)
from yuml2svg.layout.types import DUMMY_PREFIX, LayoutNode, LayoutResult, Point, RoutedEdge

__all__ = [
    "DUMMY_PREFIX",
    "MARGIN",
    "NODE_GAP",
    "RANK_GAP",
    "AugmentedGraph",
    "LayoutNode",
    "LayoutResult",
    "Point",
    "RoutedEdge",
    "SugiyamaLayout",
    "assign_coordinates",
    "assign_layers",
    "count_crossings",
    "full_layout",
    "greedy_fas_ordering",
    "insert_dummy_nodes",
    "minimise_crossings",
    "remove_cycles",
    "route_edges",
]


def full_layout(gir: GraphIR, rank_gap: float = RANK_GAP, node_gap: float = NODE_GAP) -> LayoutResult:
    """Run the default (Sugiyama) layout pipeline."""
    return SugiyamaLayout(rank_gap=rank_gap, node_gap=node_gap).layout(gir)
