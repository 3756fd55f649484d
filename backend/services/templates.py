"""Built-in workflow templates and their expansion into workflows."""

from models.process_model import WorkflowModel
from models.template_model import TemplateActor, TemplateStep, WorkflowTemplate
from models.workflow_model import Actor, Step, StepKind


def _actor_id(index: int) -> str:
    return f"actor-{index}"


def _step_id(index: int) -> str:
    return f"step-{index}"


BUILTIN_TEMPLATES: list[WorkflowTemplate] = [
    WorkflowTemplate(
        id="document-request",
        name="Document Request",
        category="Citizen Services",
        description="A citizen requests a certificate which is checked and issued.",
        actors=[
            TemplateActor(title="Citizen", department="External", role="Requester"),
            TemplateActor(title="Clerk", department="Records", role="Reviewer"),
        ],
        steps=[
            TemplateStep(type=StepKind.PROCESS, description="Submit request", actor_index=0),
            TemplateStep(type=StepKind.PROCESS, description="Receive request", actor_index=1),
            TemplateStep(
                type=StepKind.DECISION, description="Complete?", actor_index=1,
                yes_target=3, no_target=1,
            ),
            TemplateStep(type=StepKind.DOCUMENT, description="Issue certificate", actor_index=1),
        ],
    ),
    WorkflowTemplate(
        id="purchase-approval",
        name="Purchase Approval",
        category="Finance",
        description="A department purchase request is budget-checked and approved.",
        actors=[
            TemplateActor(title="Officer", department="Requesting Unit", role="Requester"),
            TemplateActor(title="Director", department="Financial Services", role="Approver"),
            TemplateActor(title="System", department="IT", role="Recorder"),
        ],
        steps=[
            TemplateStep(type=StepKind.DOCUMENT, description="Fill purchase form", actor_index=0),
            TemplateStep(
                type=StepKind.SYSTEM, description="Check budget line", actor_index=2,
                sensitive=True,
            ),
            TemplateStep(
                type=StepKind.DECISION, description="Budget sufficient?", actor_index=1,
                yes_target=3, no_target=0,
            ),
            TemplateStep(type=StepKind.PROCESS, description="Approve purchase", actor_index=1),
            TemplateStep(type=StepKind.SYSTEM, description="Record commitment", actor_index=2),
        ],
    ),
]


def list_templates() -> list[WorkflowTemplate]:
    """Return the built-in templates in catalog order."""
    return list(BUILTIN_TEMPLATES)


def get_template(template_id: str) -> WorkflowTemplate | None:
    """Look up a built-in template by id."""
    for template in BUILTIN_TEMPLATES:
        if template.id == template_id:
            return template
    return None


def expand_template(template: WorkflowTemplate) -> WorkflowModel:
    """Turn index-based template references into an id-based workflow.

    Actors become ``actor-<i>`` and steps ``step-<i>``. Indices outside the
    template are kept as references to ids that do not exist.
    """
    actors = [
        Actor(
            id=_actor_id(i),
            title=a.title,
            department=a.department,
            role=a.role,
            order_index=i,
        )
        for i, a in enumerate(template.actors)
    ]

    steps = [
        Step(
            id=_step_id(i),
            step_type=s.type,
            description=s.description,
            actor_id=_actor_id(s.actor_index),
            is_sensitive=s.sensitive,
            yes_target=_step_id(s.yes_target) if s.yes_target is not None else None,
            no_target=_step_id(s.no_target) if s.no_target is not None else None,
            order_index=i,
        )
        for i, s in enumerate(template.steps)
    ]

    return WorkflowModel(title=template.name, actors=actors, steps=steps)
