# This project was developed with assistance from AI tools.
"""Reviewer scoring and conditional requirement routes."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.requirement import (
    RequirementItem,
    RequirementListResponse,
    SatisfyRequirementRequest,
)
from ..schemas.scoring import ScoreResponse
from ..services.application import require_application
from ..services.requirements import (
    all_required_satisfied,
    list_requirements,
    mark_requirement_satisfied,
)
from ..services.review import score_application

router = APIRouter()

_REVIEWER_ROLES = (
    UserRole.ADMIN,
    UserRole.LANDLORD,
    UserRole.PROPERTY_MANAGER,
    UserRole.AGENT,
)


@router.post(
    "/{application_id}/score",
    response_model=ScoreResponse,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES))],
)
async def score(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ScoreResponse:
    """Compute and persist a point-in-time score breakdown."""
    app, breakdown = await score_application(session, user, application_id)
    return ScoreResponse(
        application_id=app.id,
        breakdown=breakdown,
        scored_at=app.scored_at,
        scored_by=app.scored_by,
    )


@router.get(
    "/{application_id}/requirements",
    response_model=RequirementListResponse,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES, UserRole.APPLICANT))],
)
async def get_requirements(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> RequirementListResponse:
    """List conditional requirements in the order they were supplied."""
    app = await require_application(session, user, application_id)
    requirements = await list_requirements(session, app.id)
    return RequirementListResponse(
        data=[RequirementItem.model_validate(r) for r in requirements],
        all_required_satisfied=await all_required_satisfied(session, app.id),
    )


@router.post(
    "/{application_id}/requirements/{requirement_id}/satisfy",
    response_model=RequirementItem,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES))],
)
async def satisfy_requirement(
    application_id: int,
    requirement_id: int,
    user: CurrentUser,
    body: SatisfyRequirementRequest | None = None,
    session: AsyncSession = Depends(get_db),
) -> RequirementItem:
    """Mark one requirement satisfied. Repeating the call is a no-op."""
    requirement = await mark_requirement_satisfied(
        session,
        user,
        application_id,
        requirement_id,
        notes=body.notes if body else None,
    )
    if requirement is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Requirement not found",
        )
    return RequirementItem.model_validate(requirement)
