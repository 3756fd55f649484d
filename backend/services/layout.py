"""Layout engine that computes x,y positions for swimlane workflow diagrams.

Layout strategy (top-to-bottom, one swimlane per actor):
Phase 0: Register synthetic start/end nodes and one sized node per step
Phase 1: Derive edges by a linear scan over the steps (branch-aware)
Phase 2: Assign centroids with the layered layout primitive
Phase 3: Convert to top-left coordinates and offset into actor swimlanes
Phase 4: Describe the swimlane bands
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

from models.workflow_model import Actor, Step, StepKind
from services.graph_layout import LayeredSpacing, RankDirection, assign_coordinates

logger = logging.getLogger(__name__)


class LayoutConfig(BaseModel):
    """Configuration options for layout algorithm."""
    node_width: int = Field(default=200, description="Width of process/document/system nodes")
    node_height: int = Field(default=80, description="Height of process/document/system nodes")
    decision_width: int = Field(
        default=240, description="Bounding width of decision diamonds"
    )
    decision_height: int = Field(
        default=120, description="Bounding height of decision diamonds"
    )
    pill_height: int = Field(default=60, description="Height of start/end capsules")
    node_sep: int = Field(default=100, description="Horizontal gap between same-rank nodes")
    rank_sep: int = Field(default=120, description="Vertical gap between ranks")
    margin_x: int = Field(default=50, description="Horizontal margin around the diagram")
    margin_y: int = Field(default=50, description="Vertical margin around the diagram")
    swimlane_height: int = Field(default=150, description="Height of one actor band")
    start_label: str = Field(default="BAŞLA", description="Label of the start node")
    end_label: str = Field(default="BİTİR", description="Label of the end node")


START_ID = "start"
END_ID = "end"

YES = "yes"
NO = "no"


def _synthetic_id(base: str, taken: set[str]) -> str:
    """Return ``base``, suffixed with underscores until it is not in ``taken``."""
    node_id = base
    while node_id in taken:
        node_id += "_"
    return node_id


def _step_size(step: Step, config: LayoutConfig) -> tuple[int, int]:
    if step.step_type == StepKind.DECISION:
        return config.decision_width, config.decision_height
    return config.node_width, config.node_height


# ---------- Phase 1: Edge derivation ----------

def _branch_edge(decision: Step, target_id: str, branch: str) -> dict[str, Any]:
    return {
        "id": f"{decision.id}-{target_id}-{branch}",
        "source": decision.id,
        "target": target_id,
        "sourceHandle": branch,
        "branchLabel": branch,
    }


def _plain_edge(source_id: str, target_id: str, edge_id: str | None = None) -> dict[str, Any]:
    return {
        "id": edge_id or f"{source_id}-{target_id}",
        "source": source_id,
        "target": target_id,
    }


def build_edges(steps: list[Step], start_id: str, end_id: str) -> list[dict[str, Any]]:
    """Derive the diagram edges from the ordered step list.

    A step is joined to the one before it only when that predecessor is not a
    decision. Decisions fan out exclusively through their ``yes_target`` and
    ``no_target``; a decision whose targets are unset or unknown therefore has
    no outgoing edge. When both targets name the same step only the yes edge
    is drawn.

    Edge ids are unique: an id already taken gets the edge's index appended.
    """
    # TODO: decide whether an unmatched decision should fall back to a plain
    # edge to the next step instead of leaving a gap.
    step_ids = {s.id for s in steps}
    edges: list[dict[str, Any]] = []
    previous: Step | None = None

    for step in steps:
        if previous is None:
            edges.append(_plain_edge(start_id, step.id, f"{start_id}-{step.id}"))
        elif previous.step_type != StepKind.DECISION:
            edges.append(_plain_edge(previous.id, step.id))

        if step.step_type == StepKind.DECISION:
            if step.yes_target in step_ids:
                edges.append(_branch_edge(step, step.yes_target, YES))
            if step.no_target in step_ids and step.no_target != step.yes_target:
                edges.append(_branch_edge(step, step.no_target, NO))

        previous = step

    edges.append(_plain_edge(previous.id, end_id, f"{previous.id}-{end_id}"))
    return _with_unique_ids(edges)


def _with_unique_ids(edges: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Suffix repeated edge ids with the edge index, keeping the first as is."""
    taken: set[str] = set()
    for index, edge in enumerate(edges):
        edge_id = edge["id"]
        if edge_id in taken:
            edge_id = f"{edge_id}-{index}"
            while edge_id in taken:
                edge_id += "_"
            edge["id"] = edge_id
        taken.add(edge_id)
    return edges


# ---------- Main layout function ----------

def compute_layout(
    actors: list[Actor],
    steps: list[Step],
    config: LayoutConfig | None = None,
) -> dict[str, Any]:
    """Convert ordered actors and steps into positioned swimlane diagram data.

    Returns a dict with ``nodes`` (top-left positioned), ``edges`` and
    ``swimlanes``. Empty actors or steps produce an empty diagram. Unknown
    actor or target references fall back to lane 0 and to no edge.
    """
    if config is None:
        config = LayoutConfig()

    if not actors or not steps:
        return {"nodes": [], "edges": [], "swimlanes": []}

    # --- Phase 0 ---
    step_ids = {s.id for s in steps}
    start_id = _synthetic_id(START_ID, step_ids)
    end_id = _synthetic_id(END_ID, step_ids | {start_id})

    lane_of_actor: dict[str, int] = {}
    for index, actor in enumerate(actors):
        lane_of_actor.setdefault(actor.id, index)

    nodes: list[dict[str, Any]] = [{
        "id": start_id, "kind": "start", "label": config.start_label,
        "width": config.node_width, "height": config.pill_height,
        "isSensitive": False, "actorId": None, "laneIndex": 0,
    }]
    registered = {start_id}
    for step in steps:
        # A repeated id is drawn once, at its first occurrence
        if step.id in registered:
            continue
        registered.add(step.id)
        width, height = _step_size(step, config)
        nodes.append({
            "id": step.id, "kind": step.step_type.value, "label": step.description,
            "width": width, "height": height,
            "isSensitive": step.is_sensitive, "actorId": step.actor_id,
            "laneIndex": lane_of_actor.get(step.actor_id, 0) if step.actor_id else 0,
        })
    nodes.append({
        "id": end_id, "kind": "end", "label": config.end_label,
        "width": config.node_width, "height": config.pill_height,
        "isSensitive": False, "actorId": None, "laneIndex": 0,
    })

    # --- Phase 1 ---
    edges = build_edges(steps, start_id, end_id)

    # --- Phase 2 ---
    centroids = assign_coordinates(
        {n["id"]: (n["width"], n["height"]) for n in nodes},
        [(e["source"], e["target"]) for e in edges],
        direction=RankDirection.TB,
        spacing=LayeredSpacing(
            node_sep=config.node_sep,
            rank_sep=config.rank_sep,
            margin_x=config.margin_x,
            margin_y=config.margin_y,
        ),
    )

    # --- Phase 3 ---
    for node in nodes:
        cx, cy = centroids[node["id"]]
        node["x"] = cx - node["width"] / 2
        node["y"] = cy - node["height"] / 2 + node["laneIndex"] * config.swimlane_height

    # --- Phase 4 ---
    swimlanes = [
        {
            "actorId": actor.id,
            "title": actor.title,
            "department": actor.department,
            "bandTop": index * config.swimlane_height,
            "bandHeight": config.swimlane_height,
        }
        for index, actor in enumerate(actors)
    ]

    logger.debug(
        "Laid out %d nodes, %d edges across %d swimlanes",
        len(nodes), len(edges), len(swimlanes),
    )

    return {"nodes": nodes, "edges": edges, "swimlanes": swimlanes}
