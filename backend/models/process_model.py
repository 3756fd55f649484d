"""Container model for a complete workflow description."""

from pydantic import BaseModel, Field

from .workflow_model import Actor, Step


class WorkflowModel(BaseModel):
    """Complete workflow containing actors and ordered steps."""
    title: str = "Untitled Workflow"
    actors: list[Actor] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
