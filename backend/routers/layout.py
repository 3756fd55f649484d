"""Layout router for workflow diagram computation."""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from models.process_model import WorkflowModel
from models.workflow_model import Actor, Step
from services.layout import compute_layout
from services.session import SessionManager
from services.validator import validate_workflow

logger = logging.getLogger(__name__)

router = APIRouter()
session_manager = SessionManager()


class LayoutRequest(BaseModel):
    """Request body for layout endpoint."""

    title: str = "Untitled Workflow"
    actors: list[Actor] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    session_id: str | None = None


class LayoutResponse(BaseModel):
    """Response body for layout and template endpoints."""

    session_id: str
    model: dict[str, Any]
    diagram: dict[str, Any]


def layout_workflow(model: WorkflowModel, session_id: str | None = None) -> LayoutResponse:
    """Validate, lay out and store a workflow; shared by the workflow routers."""
    model.warnings.extend(validate_workflow(model))
    if model.warnings:
        logger.info(
            "Workflow '%s' has %d modeling warnings", model.title, len(model.warnings)
        )

    diagram = compute_layout(model.actors, model.steps)
    model_data = model.model_dump()

    stored_id = session_manager.store_result(session_id, model_data, diagram)
    return LayoutResponse(session_id=stored_id, model=model_data, diagram=diagram)


@router.post("/layout", response_model=LayoutResponse)
async def layout_endpoint(request: LayoutRequest) -> LayoutResponse:
    """Compute the swimlane diagram for an ordered actor and step list."""
    model = WorkflowModel(
        title=request.title,
        actors=request.actors,
        steps=request.steps,
    )
    return layout_workflow(model, request.session_id)
