"""Layout types shared between the layout engine and the SVG renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from yuml2svg.ir.graph import EdgeData
from yuml2svg.types import Direction


@dataclass
class LayoutNode:
    """A positioned node; (x, y) is the top-left corner in pixels."""

    id: str
    layer: int
    order: int
    x: float
    y: float
    width: float
    height: float

    @property
    def cx(self) -> float:
        return self.x + self.width / 2

    @property
    def cy(self) -> float:
        return self.y + self.height / 2


@dataclass
class Point:
    x: float
    y: float


@dataclass
class RoutedEdge:
    """A document edge with its polyline from tail boundary to head boundary."""

    tail: str
    head: str
    data: EdgeData
    waypoints: list[Point]


@dataclass
class LayoutResult:
    """Self-contained layout output: everything the painter needs."""

    nodes: list[LayoutNode]
    edges: list[RoutedEdge]
    direction: Direction
    width: float = 0.0
    height: float = 0.0
    dummies: dict[str, LayoutNode] = field(default_factory=dict)

    def node(self, node_id: str) -> LayoutNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


DUMMY_PREFIX = "__dummy_"
