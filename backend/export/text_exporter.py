"""Text exporter that lists a workflow's swimlanes, steps and flow."""

from typing import Any

from models.process_model import WorkflowModel
from services.presentation import edge_style


def _node_names(diagram: dict[str, Any]) -> dict[str, str]:
    """Map node ids to the name printed in the flow section."""
    names: dict[str, str] = {}
    for node in diagram.get("nodes", []):
        if node["kind"] in ("start", "end"):
            names[node["id"]] = node["label"]
        else:
            names[node["id"]] = node["id"]
    return names


def _export_flow_line(edge: dict[str, Any], names: dict[str, str]) -> str:
    source = names.get(edge["source"], edge["source"])
    target = names.get(edge["target"], edge["target"])
    badge = edge_style(edge.get("branchLabel")).badge_text
    if badge:
        return f"  {source} --{badge}--> {target}"
    return f"  {source} --> {target}"


def export_text(model: WorkflowModel, diagram: dict[str, Any]) -> str:
    """Render a workflow and its diagram edges as a plain-text summary.

    Args:
        model: The workflow that was laid out.
        diagram: The output of ``compute_layout`` for that workflow.

    Returns:
        A multi-line string ending with a newline.
    """
    actor_titles = {a.id: a.title for a in model.actors}
    lines: list[str] = [f"Workflow: {model.title}", ""]

    lines.append("Swimlanes:")
    for position, lane in enumerate(diagram.get("swimlanes", []), start=1):
        department = f" - {lane['department']}" if lane["department"] else ""
        lines.append(f"  {position}. {lane['title']}{department}")
    lines.append("")

    lines.append("Steps:")
    for step in model.steps:
        line = f'  [{step.step_type.value}] {step.id} "{step.description}"'
        if step.actor_id in actor_titles:
            line += f" ({actor_titles[step.actor_id]})"
        if step.is_sensitive:
            line += " !sensitive"
        lines.append(line)
    lines.append("")

    lines.append("Flow:")
    names = _node_names(diagram)
    for edge in diagram.get("edges", []):
        lines.append(_export_flow_line(edge, names))
    lines.append("")

    return "\n".join(lines)
