"""Export router for text, GraphML, and JSON download endpoints."""

import json
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from export.graphml_exporter import export_graphml
from export.text_exporter import export_text
from models.process_model import WorkflowModel
from services.session import SessionManager

router = APIRouter()
session_manager = SessionManager()


class ExportRequest(BaseModel):
    """Request body for export endpoints."""

    session_id: str


def _get_result_from_session(session_id: str) -> tuple[WorkflowModel, dict[str, Any]]:
    """Retrieve the workflow and its diagram from session data.

    Raises:
        HTTPException: If session not found or diagram data missing.
    """
    session = session_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    if session.model is None or session.diagram is None:
        raise HTTPException(status_code=400, detail="No diagram data in session")

    return WorkflowModel(**session.model), session.diagram


@router.post("/export/text")
async def export_text_endpoint(request: ExportRequest) -> Response:
    """Export the current workflow as a plain-text summary."""
    model, diagram = _get_result_from_session(request.session_id)
    content = export_text(model, diagram)
    return Response(
        content=content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="workflow.txt"'},
    )


@router.post("/export/graphml")
async def export_graphml_endpoint(request: ExportRequest) -> Response:
    """Export the current diagram as GraphML."""
    model, diagram = _get_result_from_session(request.session_id)
    content = export_graphml(diagram, title=model.title)
    return Response(
        content=content,
        media_type="application/xml; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="workflow.graphml"'},
    )


@router.post("/export/json")
async def export_json_endpoint(request: ExportRequest) -> Response:
    """Export the current diagram as JSON."""
    _, diagram = _get_result_from_session(request.session_id)
    content = json.dumps(diagram, ensure_ascii=False, indent=2)
    return Response(
        content=content,
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="workflow.json"'},
    )
