"""Sugiyama-style layered graph layout in pixel coordinates.

Phases:
  1. Cycle removal (greedy-FAS)
  2. Layer assignment (longest path)
  3. Dummy node insertion
  4. Crossing minimization (barycenter)
  5. Coordinate assignment
  6. Edge routing (polylines through dummy nodes)

All iteration follows node and edge insertion order, never set or hash
order, so the same document always yields the same coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import networkx as nx

from yuml2svg.ir.graph import GraphIR
from yuml2svg.layout.types import DUMMY_PREFIX, LayoutNode, LayoutResult, Point, RoutedEdge
from yuml2svg.types import Direction

# ─── Geometry constants (pixels) ─────────────────────────────────────────────

RANK_GAP: float = 50.0
NODE_GAP: float = 30.0
MARGIN: float = 8.0
DUMMY_BREADTH: float = 10.0
LOOP_SIZE: float = 18.0
PARALLEL_OFFSET: float = 10.0
MAX_CROSSING_PASSES: int = 24


# ─── Cycle Removal (Greedy-FAS) ─────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Order nodes so that few edges point backwards (greedy feedback arc set)."""
    active: dict[str, None] = dict.fromkeys(graph.nodes)
    out_deg = {n: graph.out_degree(n) for n in graph.nodes}
    in_deg = {n: graph.in_degree(n) for n in graph.nodes}
    head: list[str] = []
    tail: list[str] = []

    def drop(node: str) -> None:
        del active[node]
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        sinks = [n for n in active if out_deg[n] == 0]
        if sinks:
            for sink in sinks:
                drop(sink)
                tail.append(sink)
            continue
        sources = [n for n in active if in_deg[n] == 0]
        if sources:
            for source in sources:
                drop(source)
                head.append(source)
            continue
        best = max(active, key=lambda n: out_deg[n] - in_deg[n])
        drop(best)
        head.append(best)

    tail.reverse()
    return head + tail


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Return (dag, reversed_edges); self-loops are dropped from the dag."""
    dag: nx.DiGraph = nx.DiGraph()
    dag.add_nodes_from(graph.nodes(data=True))
    if graph.number_of_nodes() == 0:
        return dag, set()

    position = {node: pos for pos, node in enumerate(greedy_fas_ordering(graph))}
    reversed_edges: set[tuple[str, str]] = set()
    for src, tgt in graph.edges():
        if src == tgt:
            continue
        if position[src] > position[tgt]:
            reversed_edges.add((src, tgt))
            dag.add_edge(tgt, src)
        else:
            dag.add_edge(src, tgt)
    return dag, reversed_edges


# ─── Layer Assignment ────────────────────────────────────────────────────────


def assign_layers(dag: nx.DiGraph) -> dict[str, int]:
    """Longest-path layering: every edge goes down at least one layer."""
    layers = {node: 0 for node in dag.nodes}
    for node in nx.topological_sort(dag):
        for succ in dag.successors(node):
            layers[succ] = max(layers[succ], layers[node] + 1)
    return layers


# ─── Dummy Node Insertion ────────────────────────────────────────────────────


@dataclass
class AugmentedGraph:
    graph: nx.DiGraph
    layers: dict[str, int]
    layer_count: int
    chains: dict[tuple[str, str], list[str]] = field(default_factory=dict)


def insert_dummy_nodes(dag: nx.DiGraph, layers: dict[str, int]) -> AugmentedGraph:
    """Split edges spanning several layers into chains of dummy nodes."""
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(dag.nodes)
    layers = dict(layers)
    chains: dict[tuple[str, str], list[str]] = {}

    for edge_no, (src, tgt) in enumerate(dag.edges()):
        span = layers[tgt] - layers[src]
        if span <= 1:
            g.add_edge(src, tgt)
            continue
        chain: list[str] = []
        prev = src
        for step in range(1, span):
            dummy = f"{DUMMY_PREFIX}{edge_no}_{step}"
            g.add_node(dummy)
            layers[dummy] = layers[src] + step
            g.add_edge(prev, dummy)
            chain.append(dummy)
            prev = dummy
        g.add_edge(prev, tgt)
        chains[(src, tgt)] = chain

    layer_count = (max(layers.values()) + 1) if layers else 1
    return AugmentedGraph(graph=g, layers=layers, layer_count=layer_count, chains=chains)


# ─── Crossing Minimization ───────────────────────────────────────────────────


def minimise_crossings(aug: AugmentedGraph) -> list[list[str]]:
    """Reorder each layer by the barycenter of its neighbours, keeping the best pass."""
    ordering: list[list[str]] = [[] for _ in range(aug.layer_count)]
    for node_id in aug.graph.nodes:
        ordering[aug.layers[node_id]].append(node_id)

    best = [list(layer) for layer in ordering]
    best_crossings = count_crossings(best, aug.graph)

    for _pass in range(MAX_CROSSING_PASSES):
        if best_crossings == 0:
            break
        for idx in range(1, aug.layer_count):
            _sort_by_barycenter(ordering[idx], ordering[idx - 1], aug.graph.predecessors)
        for idx in range(aug.layer_count - 2, -1, -1):
            _sort_by_barycenter(ordering[idx], ordering[idx + 1], aug.graph.successors)

        crossings = count_crossings(ordering, aug.graph)
        if crossings >= best_crossings:
            break
        best = [list(layer) for layer in ordering]
        best_crossings = crossings

    return best


def _sort_by_barycenter(layer: list[str], fixed: list[str], neighbours) -> None:
    fixed_pos = {nid: float(i) for i, nid in enumerate(fixed)}
    keys: dict[str, float] = {}
    for i, node_id in enumerate(layer):
        positions = [fixed_pos[nb] for nb in neighbours(node_id) if nb in fixed_pos]
        keys[node_id] = sum(positions) / len(positions) if positions else float(i)
    layer.sort(key=lambda nid: keys[nid])


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    total = 0
    for upper, lower in zip(ordering, ordering[1:]):
        lower_pos = {nid: i for i, nid in enumerate(lower)}
        segments = [
            (up, lower_pos[nb]) for up, src in enumerate(upper) for nb in graph.successors(src) if nb in lower_pos
        ]
        for i, (a0, a1) in enumerate(segments):
            for b0, b1 in segments[i + 1 :]:
                if (a0 - b0) * (a1 - b1) < 0:
                    total += 1
    return total


# ─── Coordinate Assignment ───────────────────────────────────────────────────


def assign_coordinates(
    ordering: list[list[str]],
    aug: AugmentedGraph,
    gir: GraphIR,
    rank_gap: float = RANK_GAP,
    node_gap: float = NODE_GAP,
) -> dict[str, LayoutNode]:
    """Place every real and dummy node; returns positions keyed by node id.

    Coordinates are computed on two abstract axes, ``rank`` (across layers)
    and ``breadth`` (along a layer), then mapped to x/y by direction.
    """
    horizontal = gir.direction in (Direction.LR, Direction.RL)

    def extent(node_id: str) -> tuple[float, float]:
        """(breadth, depth) of a node on the abstract axes."""
        if node_id.startswith(DUMMY_PREFIX):
            return (DUMMY_BREADTH, 0.0)
        data = gir.node_data(node_id)
        return (data.height, data.width) if horizontal else (data.width, data.height)

    layer_depth = [max((extent(n)[1] for n in layer), default=0.0) for layer in ordering]
    rank_start: list[float] = []
    pos = 0.0
    for depth in layer_depth:
        rank_start.append(pos)
        pos += depth + rank_gap
    total_rank = max(0.0, pos - rank_gap)

    center: dict[str, float] = {}
    for layer in ordering:
        cursor = 0.0
        for node_id in layer:
            breadth = extent(node_id)[0]
            center[node_id] = cursor + breadth / 2
            cursor += breadth + node_gap

    def settle(layer: list[str], neighbours) -> None:
        desired: dict[str, float] = {}
        for node_id in layer:
            linked = [center[nb] for nb in neighbours(node_id) if nb in center]
            desired[node_id] = sum(linked) / len(linked) if linked else center[node_id]
        right_edge = float("-inf")
        for node_id in layer:
            half = extent(node_id)[0] / 2
            center[node_id] = max(desired[node_id], right_edge + node_gap + half)
            right_edge = center[node_id] + half

    for idx in range(1, len(ordering)):
        settle(ordering[idx], aug.graph.predecessors)
    for idx in range(len(ordering) - 2, -1, -1):
        settle(ordering[idx], aug.graph.successors)

    low = min((center[n] - extent(n)[0] / 2 for n in center), default=0.0)

    positions: dict[str, LayoutNode] = {}
    for layer_idx, layer in enumerate(ordering):
        for order, node_id in enumerate(layer):
            breadth, depth = extent(node_id)
            b = center[node_id] - low - breadth / 2 + MARGIN
            r = rank_start[layer_idx] + (layer_depth[layer_idx] - depth) / 2
            if gir.direction == Direction.RL:
                r = total_rank - r - depth
            r += MARGIN
            if horizontal:
                positions[node_id] = LayoutNode(node_id, layer_idx, order, r, b, depth, breadth)
            else:
                positions[node_id] = LayoutNode(node_id, layer_idx, order, b, r, breadth, depth)
    return positions


# ─── Edge Routing ────────────────────────────────────────────────────────────


def _clip(node: LayoutNode, toward: Point) -> Point:
    """Point where the ray from the node centre to ``toward`` leaves its box."""
    dx = toward.x - node.cx
    dy = toward.y - node.cy
    if dx == 0 and dy == 0:
        return Point(node.cx, node.cy)
    scale = min(
        (node.width / 2) / abs(dx) if dx else float("inf"),
        (node.height / 2) / abs(dy) if dy else float("inf"),
    )
    return Point(node.cx + dx * scale, node.cy + dy * scale)


def _self_loop(node: LayoutNode) -> list[Point]:
    right = node.x + node.width
    top = node.cy - node.height / 4
    bottom = node.cy + node.height / 4
    return [Point(right, top), Point(right + LOOP_SIZE, top), Point(right + LOOP_SIZE, bottom), Point(right, bottom)]


def route_edges(
    gir: GraphIR,
    positions: dict[str, LayoutNode],
    aug: AugmentedGraph,
    reversed_edges: set[tuple[str, str]],
) -> list[RoutedEdge]:
    """Route every document edge as a polyline through its dummy chain."""
    horizontal = gir.direction in (Direction.LR, Direction.RL)

    pair_members: dict[frozenset[str], list[int]] = {}
    for data in gir.edges:
        pair_members.setdefault(frozenset((data.edge.tail, data.edge.head)), []).append(data.index)

    routes: list[RoutedEdge] = []
    for data in gir.edges:
        tail, head = data.edge.tail, data.edge.head
        if tail == head:
            routes.append(RoutedEdge(tail, head, data, _self_loop(positions[tail])))
            continue

        if (tail, head) in reversed_edges:
            chain = list(reversed(aug.chains.get((head, tail), [])))
        else:
            chain = aug.chains.get((tail, head), [])

        members = pair_members[frozenset((tail, head))]
        shift = (members.index(data.index) - (len(members) - 1) / 2) * PARALLEL_OFFSET

        def offset(p: Point, shift: float = shift) -> Point:
            return Point(p.x, p.y + shift) if horizontal else Point(p.x + shift, p.y)

        tail_node, head_node = positions[tail], positions[head]
        centres = [offset(Point(tail_node.cx, tail_node.cy))]
        centres += [offset(Point(positions[d].cx, positions[d].cy)) for d in chain]
        centres.append(offset(Point(head_node.cx, head_node.cy)))

        start = _clip(_moved(tail_node, centres[0]), centres[1])
        end = _clip(_moved(head_node, centres[-1]), centres[-2])
        routes.append(RoutedEdge(tail, head, data, [start, *centres[1:-1], end]))

    return routes


def _moved(node: LayoutNode, centre: Point) -> LayoutNode:
    return LayoutNode(
        node.id, node.layer, node.order, centre.x - node.width / 2, centre.y - node.height / 2, node.width, node.height
    )


# ─── SugiyamaLayout Engine ───────────────────────────────────────────────────


class SugiyamaLayout:
    """Sugiyama layered layout engine."""

    def __init__(self, rank_gap: float = RANK_GAP, node_gap: float = NODE_GAP) -> None:
        self.rank_gap = rank_gap
        self.node_gap = node_gap

    def layout(self, gir: GraphIR) -> LayoutResult:
        dag, reversed_edges = remove_cycles(gir.digraph)
        aug = insert_dummy_nodes(dag, assign_layers(dag))
        ordering = minimise_crossings(aug)
        positions = assign_coordinates(ordering, aug, gir, self.rank_gap, self.node_gap)
        routed = route_edges(gir, positions, aug, reversed_edges)

        nodes = [positions[n] for n in gir.digraph.nodes]
        dummies = {k: v for k, v in positions.items() if k.startswith(DUMMY_PREFIX)}

        xs = [n.x + n.width for n in nodes] + [p.x for e in routed for p in e.waypoints]
        ys = [n.y + n.height for n in nodes] + [p.y for e in routed for p in e.waypoints]
        return LayoutResult(
            nodes=nodes,
            edges=routed,
            direction=gir.direction,
            width=max(xs, default=0.0) + MARGIN,
            height=max(ys, default=0.0) + MARGIN,
            dummies=dummies,
        )
