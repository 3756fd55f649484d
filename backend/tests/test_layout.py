"""Unit tests for the swimlane workflow layout engine."""

import pytest

from models.workflow_model import Actor, Step, StepKind
from services.layout import LayoutConfig, build_edges, compute_layout


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _actor(actor_id: str, title: str | None = None, department: str = "Records") -> Actor:
    return Actor(id=actor_id, title=title or actor_id, department=department)


def _step(step_id: str, kind: StepKind = StepKind.PROCESS, **kwargs) -> Step:
    kwargs.setdefault("description", step_id)
    return Step(id=step_id, step_type=kind, **kwargs)


def _node_dict(result: dict) -> dict[str, dict]:
    return {n["id"]: n for n in result["nodes"]}


def _edge_pairs(result: dict) -> list[tuple[str, str, str | None]]:
    return [(e["source"], e["target"], e.get("branchLabel")) for e in result["edges"]]


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------

EMPTY = {"nodes": [], "edges": [], "swimlanes": []}


def test_empty_actors_and_steps():
    assert compute_layout([], []) == EMPTY


def test_actors_without_steps():
    assert compute_layout([_actor("a0")], []) == EMPTY


def test_steps_without_actors():
    assert compute_layout([], [_step("s1")]) == EMPTY


# ---------------------------------------------------------------------------
# Boundary nodes and sequential flow
# ---------------------------------------------------------------------------

def test_single_step_coordinates():
    """A one-step workflow stacks start, step and end on one column."""
    result = compute_layout([_actor("a0")], [_step("s1", actor_id="a0")])
    nodes = _node_dict(result)

    assert list(nodes) == ["start", "s1", "end"]
    assert (nodes["start"]["x"], nodes["start"]["y"]) == (50, 50)
    assert (nodes["s1"]["x"], nodes["s1"]["y"]) == (50, 230)
    assert (nodes["end"]["x"], nodes["end"]["y"]) == (50, 430)


def test_boundary_nodes_always_present():
    steps = [_step("s1"), _step("s2", StepKind.SYSTEM), _step("s3", StepKind.DOCUMENT)]
    result = compute_layout([_actor("a0")], steps)

    kinds = [n["kind"] for n in result["nodes"]]
    assert kinds.count("start") == 1
    assert kinds.count("end") == 1

    pairs = _edge_pairs(result)
    assert pairs.count(("start", "s1", None)) == 1
    assert pairs.count(("s3", "end", None)) == 1


def test_sequential_edges_and_ids():
    steps = [_step("s1"), _step("s2"), _step("s3")]
    result = compute_layout([_actor("a0")], steps)

    assert [e["id"] for e in result["edges"]] == ["start-s1", "s1-s2", "s2-s3", "s3-end"]
    for edge in result["edges"]:
        assert "branchLabel" not in edge
        assert "sourceHandle" not in edge


def test_sequential_order_is_top_to_bottom():
    steps = [_step(f"s{i}") for i in range(1, 6)]
    result = compute_layout([_actor("a0")], steps)
    nodes = _node_dict(result)

    ordered = ["start", "s1", "s2", "s3", "s4", "s5", "end"]
    for upper, lower in zip(ordered, ordered[1:]):
        assert nodes[upper]["y"] < nodes[lower]["y"], f"{upper} should be above {lower}"


def test_node_sizes_depend_on_kind():
    steps = [
        _step("p", StepKind.PROCESS),
        _step("d", StepKind.DECISION, yes_target="doc"),
        _step("doc", StepKind.DOCUMENT),
        _step("sys", StepKind.SYSTEM),
    ]
    result = compute_layout([_actor("a0")], steps)
    nodes = _node_dict(result)

    assert (nodes["start"]["width"], nodes["start"]["height"]) == (200, 60)
    assert (nodes["end"]["width"], nodes["end"]["height"]) == (200, 60)
    assert (nodes["d"]["width"], nodes["d"]["height"]) == (240, 120)
    for step_id in ("p", "doc", "sys"):
        assert (nodes[step_id]["width"], nodes[step_id]["height"]) == (200, 80)


def test_node_payload_fields():
    steps = [_step("s1", description="Receive request", actor_id="a0", is_sensitive=True)]
    result = compute_layout([_actor("a0")], steps)
    node = _node_dict(result)["s1"]

    assert node["kind"] == "process"
    assert node["label"] == "Receive request"
    assert node["isSensitive"] is True
    assert node["actorId"] == "a0"
    assert node["laneIndex"] == 0

    start = _node_dict(result)["start"]
    assert start["label"] == "BAŞLA"
    assert _node_dict(result)["end"]["label"] == "BİTİR"


def test_synthetic_ids_avoid_step_ids():
    """Steps named 'start' or 'end' do not collide with the boundary nodes."""
    steps = [_step("start"), _step("end")]
    result = compute_layout([_actor("a0")], steps)
    ids = [n["id"] for n in result["nodes"]]

    assert ids == ["start_", "start", "end", "end_"]
    assert _edge_pairs(result) == [
        ("start_", "start", None),
        ("start", "end", None),
        ("end", "end_", None),
    ]


# ---------------------------------------------------------------------------
# Decision fan-out
# ---------------------------------------------------------------------------

def test_decision_fan_out_to_later_steps():
    """yes/no edges follow the explicit targets, not positional order."""
    steps = [
        _step("D", StepKind.DECISION, yes_target="S2", no_target="S3"),
        _step("S2"),
        _step("S3"),
    ]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert ("D", "S2", "yes") in pairs
    assert ("D", "S3", "no") in pairs
    assert [p for p in pairs if p[0] == "D" and p[2] is None] == []


def test_decision_branch_edge_shape():
    steps = [
        _step("D", StepKind.DECISION, yes_target="S2", no_target="S3"),
        _step("S2"),
        _step("S3"),
    ]
    result = compute_layout([_actor("a0")], steps)
    edges = {e["id"]: e for e in result["edges"]}

    assert edges["D-S2-yes"] == {
        "id": "D-S2-yes", "source": "D", "target": "S2",
        "sourceHandle": "yes", "branchLabel": "yes",
    }
    assert edges["D-S3-no"]["sourceHandle"] == "no"
    assert edges["D-S3-no"]["branchLabel"] == "no"


def test_decision_without_targets_leaves_gap():
    """A decision with no targets is not joined to the step after it."""
    steps = [_step("D", StepKind.DECISION), _step("S")]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert not any(src == "D" and tgt == "S" for src, tgt, _ in pairs)
    assert not any(src == "D" for src, _, _ in pairs)
    assert len(result["nodes"]) == 4


def test_decision_next_step_not_targeted():
    steps = [
        _step("D", StepKind.DECISION, yes_target="S3"),
        _step("S2"),
        _step("S3"),
    ]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert ("D", "S3", "yes") in pairs
    assert not any(src == "D" and tgt == "S2" for src, tgt, _ in pairs)
    assert ("S2", "S3", None) in pairs


def test_unknown_target_is_dropped_silently():
    steps = [_step("D", StepKind.DECISION, yes_target="missing", no_target="S"), _step("S")]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert ("D", "S", "no") in pairs
    assert not any(tgt == "missing" for _, tgt, _ in pairs)


def test_targets_on_non_decision_are_ignored():
    steps = [_step("P", yes_target="S2"), _step("S1"), _step("S2")]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert ("P", "S1", None) in pairs
    assert not any(branch is not None for _, _, branch in pairs)


def test_last_step_decision_still_reaches_end():
    steps = [_step("S"), _step("D", StepKind.DECISION, no_target="S")]
    result = compute_layout([_actor("a0")], steps)
    pairs = _edge_pairs(result)

    assert ("D", "S", "no") in pairs
    assert pairs[-1] == ("D", "end", None)


def test_same_rank_branches_do_not_overlap():
    """Two branches landing on the same rank are placed side by side."""
    steps = [
        _step("D", StepKind.DECISION, yes_target="A", no_target="B"),
        _step("A", StepKind.DECISION, yes_target="C"),
        _step("B"),
        _step("C"),
    ]
    result = compute_layout([_actor("a0")], steps)
    nodes = _node_dict(result)

    a, b = nodes["A"], nodes["B"]
    assert a["y"] + a["height"] / 2 == b["y"] + b["height"] / 2, "A and B share a rank"
    left, right = sorted((a, b), key=lambda n: n["x"])
    assert left["x"] + left["width"] <= right["x"]


def test_build_edges_linear_scan():
    steps = [
        _step("s1"),
        _step("s2", StepKind.DECISION, yes_target="s3", no_target="s1"),
        _step("s3"),
    ]
    edges = build_edges(steps, "start", "end")

    assert [e["id"] for e in edges] == ["start-s1", "s1-s2", "s2-s3-yes", "s2-s1-no", "s3-end"]


def test_decision_with_identical_targets_draws_yes_only():
    steps = [
        _step("D", StepKind.DECISION, yes_target="T", no_target="T"),
        _step("T"),
    ]
    edges = build_edges(steps, "start", "end")

    assert [e["id"] for e in edges] == ["start-D", "D-T-yes", "T-end"]


def test_repeated_pairs_get_unique_edge_ids():
    steps = [_step("a"), _step("b"), _step("a"), _step("b")]
    edges = build_edges(steps, "start", "end")
    ids = [e["id"] for e in edges]

    assert ids == ["start-a", "a-b", "b-a", "a-b-3", "b-end"]
    assert len(set(ids)) == len(ids)


def test_hyphenated_ids_do_not_collide_with_branch_ids():
    steps = [
        _step("x", StepKind.DECISION, yes_target="y"),
        _step("y"),
        _step("x-y"),
        _step("yes"),
    ]
    edges = build_edges(steps, "start", "end")
    ids = [e["id"] for e in edges]

    assert ids == ["start-x", "x-y-yes", "y-x-y", "x-y-yes-3", "yes-end"]
    assert edges[3]["source"] == "x-y" and edges[3]["target"] == "yes"


# ---------------------------------------------------------------------------
# Swimlanes
# ---------------------------------------------------------------------------

def test_swimlane_bucketing_offsets_by_band_height():
    actors = [_actor("A"), _actor("B")]
    owned_by_a = compute_layout(actors, [_step("s1", actor_id="A")])
    owned_by_b = compute_layout(actors, [_step("s1", actor_id="B")])

    y_a = _node_dict(owned_by_a)["s1"]["y"]
    y_b = _node_dict(owned_by_b)["s1"]["y"]
    assert y_b - y_a >= 1 * LayoutConfig().swimlane_height
    assert _node_dict(owned_by_b)["s1"]["laneIndex"] == 1


def test_lane_uses_actor_position_not_order_index():
    actors = [
        Actor(id="A", title="A", order_index=5),
        Actor(id="B", title="B", order_index=0),
    ]
    result = compute_layout(actors, [_step("s1", actor_id="B")])
    assert _node_dict(result)["s1"]["laneIndex"] == 1


def test_unknown_or_missing_actor_defaults_to_first_lane():
    actors = [_actor("A"), _actor("B")]
    steps = [_step("s1", actor_id="ghost"), _step("s2")]
    result = compute_layout(actors, steps)
    nodes = _node_dict(result)

    assert nodes["s1"]["laneIndex"] == 0
    assert nodes["s2"]["laneIndex"] == 0


def test_boundary_nodes_stay_in_first_lane():
    actors = [_actor("A"), _actor("B")]
    result = compute_layout(actors, [_step("s1", actor_id="B")])
    nodes = _node_dict(result)

    assert nodes["start"]["laneIndex"] == 0
    assert nodes["end"]["laneIndex"] == 0
    assert nodes["start"]["y"] == 50


def test_swimlane_descriptors():
    actors = [
        _actor("a0", title="Clerk", department="Records"),
        _actor("a1", title="Director", department="Finance"),
        _actor("a2", title="System", department=""),
    ]
    result = compute_layout(actors, [_step("s1")])

    assert len(result["swimlanes"]) == len(actors)
    assert result["swimlanes"] == [
        {"actorId": "a0", "title": "Clerk", "department": "Records",
         "bandTop": 0, "bandHeight": 150},
        {"actorId": "a1", "title": "Director", "department": "Finance",
         "bandTop": 150, "bandHeight": 150},
        {"actorId": "a2", "title": "System", "department": "",
         "bandTop": 300, "bandHeight": 150},
    ]


def test_custom_config():
    config = LayoutConfig(swimlane_height=300, margin_x=0, margin_y=0, start_label="Start")
    actors = [_actor("A"), _actor("B")]
    result = compute_layout(actors, [_step("s1", actor_id="B")], config)
    nodes = _node_dict(result)

    assert nodes["start"]["label"] == "Start"
    assert (nodes["start"]["x"], nodes["start"]["y"]) == (0, 0)
    assert nodes["s1"]["y"] == 60 + 120 + 300
    assert result["swimlanes"][1]["bandTop"] == 300


# ---------------------------------------------------------------------------
# Determinism and purity
# ---------------------------------------------------------------------------

def test_layout_is_deterministic():
    actors = [_actor("A"), _actor("B"), _actor("C")]
    steps = [
        _step("s1", actor_id="A"),
        _step("s2", StepKind.DECISION, actor_id="B", yes_target="s4", no_target="s3"),
        _step("s3", actor_id="C"),
        _step("s4", StepKind.DOCUMENT, actor_id="A"),
        _step("s5", StepKind.DECISION, actor_id="B", yes_target="s6", no_target="s1"),
        _step("s6", StepKind.SYSTEM, actor_id="C"),
    ]
    first = compute_layout(actors, steps)
    second = compute_layout(actors, steps)

    assert first == second


def test_inputs_are_not_mutated():
    actors = [_actor("A")]
    steps = [_step("s1", actor_id="A"), _step("s2", StepKind.DECISION, yes_target="s1")]
    before = ([a.model_dump() for a in actors], [s.model_dump() for s in steps])

    compute_layout(actors, steps)

    assert ([a.model_dump() for a in actors], [s.model_dump() for s in steps]) == before


def test_duplicate_step_id_drawn_once():
    steps = [_step("s1"), _step("s1", description="again"), _step("s2")]
    result = compute_layout([_actor("a0")], steps)
    ids = [n["id"] for n in result["nodes"]]

    assert ids.count("s1") == 1
    assert _node_dict(result)["s1"]["label"] == "s1"


# ---------------------------------------------------------------------------
# End-to-end example
# ---------------------------------------------------------------------------

def test_clerk_certificate_example():
    """Receive → Complete? → (yes) Issue certificate, (no) back to Receive."""
    actors = [Actor(id="a0", title="Clerk", department="Records", order_index=0)]
    steps = [
        Step(id="s1", step_type=StepKind.PROCESS, description="Receive request", actor_id="a0"),
        Step(id="s2", step_type=StepKind.DECISION, description="Complete?", actor_id="a0",
             yes_target="s3", no_target="s1"),
        Step(id="s3", step_type=StepKind.DOCUMENT, description="Issue certificate", actor_id="a0"),
    ]
    result = compute_layout(actors, steps)
    nodes = _node_dict(result)

    assert list(nodes) == ["start", "s1", "s2", "s3", "end"]
    assert _edge_pairs(result) == [
        ("start", "s1", None),
        ("s1", "s2", None),
        ("s2", "s3", "yes"),
        ("s2", "s1", "no"),
        ("s3", "end", None),
    ]
    assert all(n["laneIndex"] == 0 for n in result["nodes"])
    assert nodes["s1"]["y"] < nodes["s2"]["y"] < nodes["s3"]["y"] < nodes["end"]["y"]


@pytest.mark.parametrize("count", [10, 40])
def test_long_workflow_with_back_edges(count):
    """Many steps with loops back to earlier steps still lay out fully."""
    actors = [_actor(f"a{i}") for i in range(3)]
    steps = []
    for i in range(count):
        if i % 4 == 3:
            steps.append(_step(
                f"s{i}", StepKind.DECISION, actor_id=f"a{i % 3}",
                yes_target=f"s{i + 1}" if i + 1 < count else None,
                no_target=f"s{i - 2}",
            ))
        else:
            steps.append(_step(f"s{i}", actor_id=f"a{i % 3}"))

    result = compute_layout(actors, steps)

    assert len(result["nodes"]) == count + 2
    for node in result["nodes"]:
        assert node["x"] >= 0
        assert node["y"] >= 0
