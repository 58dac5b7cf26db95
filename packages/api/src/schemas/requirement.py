# This project was developed with assistance from AI tools.
"""Schemas for conditional requirement endpoints."""

from datetime import datetime

from db.enums import RequirementType
from pydantic import BaseModel, ConfigDict, Field


class RequirementInput(BaseModel):
    """One requirement supplied with a conditional approval."""

    description: str = Field(min_length=1)
    type: RequirementType = RequirementType.INFORMATION
    required: bool = True


class RequirementItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    position: int
    requirement_type: RequirementType
    description: str = Field(min_length=1)
    required: bool
    satisfied: bool
    satisfied_at: datetime | None = None
    satisfied_by: str | None = None
    notes: str | None = None
    due_date: datetime | None = None
    created_at: datetime


class RequirementListResponse(BaseModel):
    """Response for GET /applications/{id}/requirements."""

    data: list[RequirementItem]
    all_required_satisfied: bool


class SatisfyRequirementRequest(BaseModel):
    notes: str | None = None
