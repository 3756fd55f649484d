"""Layered (Sugiyama-style) coordinate assignment for directed graphs.

Layout strategy:
Phase 0: Build graph (unknown endpoints, duplicates and self-loops dropped)
Phase 1: Pick depth-first roots so every node is reachable
Phase 2: Lay out each weakly connected component with grandalf's SugiyamaLayout
Phase 3: Place components side by side inside the margins
Phase 4: Direction transform

Nodes are registered with a (width, height) box and come back as centroids.
Roots, components and edges are handed to grandalf in insertion order, so the
result never depends on the interpreter's hash seed.
"""

from enum import Enum
from typing import NamedTuple

import networkx as nx
from grandalf.graphs import Edge, Graph, Vertex
from grandalf.layouts import SugiyamaLayout
from pydantic import BaseModel, Field


class RankDirection(str, Enum):
    """Direction in which ranks flow."""
    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"


class LayeredSpacing(BaseModel):
    """Separation constants for the layered layout."""
    node_sep: float = Field(default=50, description="Gap between nodes in the same rank")
    rank_sep: float = Field(default=50, description="Gap between consecutive ranks")
    edge_sep: float = Field(
        default=10, description="Box reserved for each bend point of a long edge"
    )
    margin_x: float = Field(default=0, description="Outer margin on the x axis")
    margin_y: float = Field(default=0, description="Outer margin on the y axis")


class Point(NamedTuple):
    x: float
    y: float


class _NodeView:
    """Box grandalf reads ``w``/``h`` from and writes the centroid ``xy`` to."""

    def __init__(self, width: float, height: float):
        self.w = width
        self.h = height
        self.xy = (0.0, 0.0)


def _is_horizontal(direction: RankDirection) -> bool:
    return direction in (RankDirection.LR, RankDirection.RL)


# ---------- Phase 0: Build graph ----------

def _build_graph(
    nodes: dict[str, tuple[float, float]],
    edges: list[tuple[str, str]],
    direction: RankDirection,
) -> nx.DiGraph:
    """Register sized nodes and the edges whose endpoints both exist."""
    graph = nx.DiGraph()
    for node_id, (width, height) in nodes.items():
        # Horizontal layouts run in a rotated frame
        if _is_horizontal(direction):
            width, height = height, width
        graph.add_node(node_id, width=float(width), height=float(height))

    for source, target in edges:
        if source == target:
            continue
        if source not in graph or target not in graph:
            continue
        graph.add_edge(source, target)

    return graph


# ---------- Phase 1: Roots ----------

def select_roots(graph: nx.DiGraph) -> list[str]:
    """One root per source strongly connected component, in insertion order.

    Every node is reachable from the returned roots, and a root's in-edges all
    come from its own cycle, so the depth-first search grandalf runs from the
    roots reverses them as feedback edges.
    """
    position = {node: i for i, node in enumerate(graph.nodes)}
    condensed = nx.condensation(graph)
    roots = [
        min(condensed.nodes[c]["members"], key=position.__getitem__)
        for c in condensed.nodes
        if condensed.in_degree(c) == 0
    ]
    return sorted(roots, key=position.__getitem__)


def _components(graph: nx.DiGraph) -> list[list[str]]:
    position = {node: i for i, node in enumerate(graph.nodes)}
    components = [
        sorted(members, key=position.__getitem__)
        for members in nx.weakly_connected_components(graph)
    ]
    return sorted(components, key=lambda members: position[members[0]])


# ---------- Phase 2: Component layout ----------

def layout_component(
    graph: nx.DiGraph,
    members: list[str],
    roots: list[str],
    spacing: LayeredSpacing,
) -> dict[str, Point]:
    """Run grandalf's Sugiyama layout on one weakly connected component.

    Returns centroids in grandalf's own frame, with ranks growing along y.
    """
    vertices: dict[str, Vertex] = {}
    for node_id in members:
        vertex = Vertex(node_id)
        attrs = graph.nodes[node_id]
        vertex.view = _NodeView(attrs["width"], attrs["height"])
        vertices[node_id] = vertex

    edges = [Edge(vertices[s], vertices[t]) for s, t in graph.edges(members)]
    core = Graph(list(vertices.values()), edges).C[0]

    sugiyama = SugiyamaLayout(core)
    sugiyama.xspace = spacing.node_sep
    sugiyama.yspace = spacing.rank_sep
    sugiyama.dw = spacing.edge_sep
    sugiyama.dh = spacing.edge_sep
    sugiyama.init_all(roots=[vertices[r] for r in roots])
    sugiyama.draw()

    return {node_id: Point(*vertex.view.xy) for node_id, vertex in vertices.items()}


# ---------- Main layout function ----------

def assign_coordinates(
    nodes: dict[str, tuple[float, float]],
    edges: list[tuple[str, str]],
    direction: RankDirection = RankDirection.TB,
    spacing: LayeredSpacing | None = None,
) -> dict[str, Point]:
    """Assign a centroid to every node of a directed graph.

    Args:
        nodes: Node id mapped to its (width, height) box, in insertion order.
        edges: Directed (source, target) pairs. Pairs naming unknown nodes
            and self-loops are ignored; cycles are tolerated.
        direction: Rank flow direction.
        spacing: Separation constants; defaults to ``LayeredSpacing()``.

    Returns:
        Node id mapped to its centroid, in the order of ``nodes``.
    """
    if spacing is None:
        spacing = LayeredSpacing()
    if not nodes:
        return {}

    if _is_horizontal(direction):
        # Ranks run along x: swap the margins for the rotated frame
        spacing = spacing.model_copy(
            update={"margin_x": spacing.margin_y, "margin_y": spacing.margin_x}
        )

    graph = _build_graph(nodes, edges, direction)
    roots = select_roots(graph)

    # --- Phase 3: components left to right, top-aligned ---
    placed: dict[str, Point] = {}
    cursor = spacing.margin_x
    bottom = 0.0
    for members in _components(graph):
        member_set = set(members)
        points = layout_component(
            graph, members, [r for r in roots if r in member_set], spacing
        )
        half_w = {n: graph.nodes[n]["width"] / 2 for n in members}
        half_h = {n: graph.nodes[n]["height"] / 2 for n in members}
        dx = cursor - min(points[n].x - half_w[n] for n in members)
        dy = spacing.margin_y - min(points[n].y - half_h[n] for n in members)
        for n in members:
            placed[n] = Point(points[n].x + dx, points[n].y + dy)

        component_right = max(placed[n].x + half_w[n] for n in members)
        bottom = max(bottom, max(placed[n].y + half_h[n] for n in members))
        cursor = component_right + spacing.node_sep

    height = bottom + spacing.margin_y

    # --- Phase 4 ---
    result: dict[str, Point] = {}
    for node_id in nodes:
        x, y = placed[node_id]
        if direction == RankDirection.BT:
            y = height - y
        elif direction == RankDirection.LR:
            x, y = y, x
        elif direction == RankDirection.RL:
            x, y = height - y, x
        result[node_id] = Point(x, y)

    return result
