"""Data-modeling diagnostics for workflow actor and step lists.

The layout engine never rejects input; these checks explain why a diagram
may be missing edges or show steps in an unexpected lane.
"""

from models.process_model import WorkflowModel
from models.workflow_model import Step, StepKind


def _targets(step: Step) -> list[tuple[str, str]]:
    return [
        (branch, target)
        for branch, target in (("yes", step.yes_target), ("no", step.no_target))
        if target is not None
    ]


def validate_workflow(model: WorkflowModel) -> list[str]:
    """Check a WorkflowModel for references the layout cannot honour.

    Returns a list of warning messages. An empty list means every reference
    resolves and every decision has an outgoing branch.
    """
    warnings: list[str] = []

    seen_actors: set[str] = set()
    for actor in model.actors:
        if actor.id in seen_actors:
            warnings.append(f"Actor '{actor.id}': duplicate id")
        seen_actors.add(actor.id)

    step_ids: set[str] = set()
    for step in model.steps:
        if step.id in step_ids:
            warnings.append(f"Step '{step.id}': duplicate id, only the first is drawn")
        step_ids.add(step.id)

    for index, step in enumerate(model.steps):
        if step.actor_id is not None and step.actor_id not in seen_actors:
            warnings.append(
                f"Step '{step.id}': actor '{step.actor_id}' not found, "
                f"placed in the first swimlane"
            )

        targets = _targets(step)

        if step.step_type != StepKind.DECISION:
            for branch, target in targets:
                warnings.append(
                    f"Step '{step.id}': {branch} target '{target}' ignored "
                    f"on a {step.step_type.value} step"
                )
            continue

        resolved = {target for _, target in targets if target in step_ids}
        for branch, target in targets:
            if target not in step_ids:
                warnings.append(
                    f"Decision '{step.id}': {branch} target '{target}' not found"
                )

        if not resolved:
            warnings.append(
                f"Decision '{step.id}': no resolvable yes/no target, "
                f"the decision has no outgoing branch"
            )

        if index + 1 < len(model.steps):
            following = model.steps[index + 1]
            if following.id not in resolved:
                warnings.append(
                    f"Decision '{step.id}': next step '{following.id}' is not "
                    f"a yes/no target, no edge connects them"
                )

    return warnings
