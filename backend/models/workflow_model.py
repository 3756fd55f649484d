"""Pydantic data models for workflow actors and steps."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class StepKind(str, Enum):
    """Types of Step elements in a workflow."""
    PROCESS = "process"
    DECISION = "decision"
    DOCUMENT = "document"
    SYSTEM = "system"


class Actor(BaseModel):
    """A role or department performing work; owns one swimlane."""
    id: str
    title: str
    department: str = ""
    role: str = ""
    order_index: int = 0


class Step(BaseModel):
    """A single step of the workflow, in default execution order.

    ``yes_target`` and ``no_target`` are only followed on decision steps.
    """
    id: str
    step_type: StepKind = StepKind.PROCESS
    description: str = ""
    actor_id: Optional[str] = None
    is_sensitive: bool = False
    yes_target: Optional[str] = None
    no_target: Optional[str] = None
    order_index: int = 0
