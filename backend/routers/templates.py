"""Template router for listing and instantiating workflow templates."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from models.template_model import WorkflowTemplate
from routers.layout import LayoutResponse, layout_workflow
from services.templates import expand_template, get_template, list_templates

router = APIRouter()


class TemplateSummary(BaseModel):
    """Catalog entry returned by the template listing."""

    id: str
    name: str
    category: str
    description: str


@router.get("/templates", response_model=list[TemplateSummary])
async def list_templates_endpoint() -> list[TemplateSummary]:
    """List the built-in workflow templates."""
    return [
        TemplateSummary(
            id=t.id, name=t.name, category=t.category, description=t.description
        )
        for t in list_templates()
    ]


@router.post("/templates/expand", response_model=LayoutResponse)
async def expand_template_endpoint(template: WorkflowTemplate) -> LayoutResponse:
    """Expand a caller-supplied template and lay it out."""
    return layout_workflow(expand_template(template))


@router.post("/templates/{template_id}/instantiate", response_model=LayoutResponse)
async def instantiate_template_endpoint(template_id: str) -> LayoutResponse:
    """Expand a built-in template and lay it out.

    Raises:
        HTTPException: If no template has this id.
    """
    template = get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return layout_workflow(expand_template(template))
