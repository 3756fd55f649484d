"""Pydantic models for reusable workflow templates.

Templates reference actors and targets by list index instead of id, the
same way they are stored in ``template_data``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .workflow_model import StepKind


class TemplateActor(BaseModel):
    """An actor slot in a template."""
    title: str
    department: str = ""
    role: str = ""


class TemplateStep(BaseModel):
    """A step in a template, referencing actors and targets by index."""
    model_config = ConfigDict(populate_by_name=True)

    type: StepKind = StepKind.PROCESS
    description: str = ""
    actor_index: int = Field(default=0, alias="actorIndex")
    sensitive: bool = False
    yes_target: Optional[int] = Field(default=None, alias="yesTarget")
    no_target: Optional[int] = Field(default=None, alias="noTarget")


class WorkflowTemplate(BaseModel):
    """A named template that expands into a workflow."""
    id: str
    name: str
    category: str = ""
    description: str = ""
    actors: list[TemplateActor] = Field(default_factory=list)
    steps: list[TemplateStep] = Field(default_factory=list)
