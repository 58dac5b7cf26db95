# This project was developed with assistance from AI tools.
"""Application lifecycle routes with RBAC enforcement."""

from typing import Literal

from db import get_db
from db.enums import ApplicationStatus, UserRole
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.application import (
    ApplicationAutosave,
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    StatusHistoryItem,
    TransitionRequest,
    TransitionResponse,
)
from ..schemas.history import CommentCreate, CommentItem, HistoryResponse
from ..schemas.status import ApplicationStatusResponse
from ..services import application as app_service
from ..services.history import add_comment, get_application_history
from ..services.lifecycle import request_transition
from ..services.status import get_application_status

router = APIRouter()

_ALL_ROLES = (
    UserRole.ADMIN,
    UserRole.APPLICANT,
    UserRole.LANDLORD,
    UserRole.PROPERTY_MANAGER,
    UserRole.AGENT,
)
_REVIEWER_ROLES = (
    UserRole.ADMIN,
    UserRole.LANDLORD,
    UserRole.PROPERTY_MANAGER,
    UserRole.AGENT,
)


@router.get(
    "/",
    response_model=ApplicationListResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def list_applications(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    sort_by: Literal["updated_at", "created_at", "score"] | None = None,
    filter_status: ApplicationStatus | None = None,
) -> ApplicationListResponse:
    """List applications visible to the current user's role and data scope."""
    applications, total = await app_service.list_applications(
        session,
        user,
        offset=offset,
        limit=limit,
        filter_status=filter_status,
        sort_by=sort_by,
    )
    return ApplicationListResponse(
        data=[ApplicationResponse.model_validate(app) for app in applications],
        pagination=Pagination.page(total, offset, limit),
    )


@router.post(
    "/",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.APPLICANT))],
)
async def create_application(
    body: ApplicationCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Start a draft application for a listing. Applicants only."""
    app = await app_service.create_application(session, user, body)
    return ApplicationResponse.model_validate(app)


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_application(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Get a single application. Returns 404 for out-of-scope resources."""
    app = await app_service.require_application(session, user, application_id)
    return ApplicationResponse.model_validate(app)


@router.patch(
    "/{application_id}/autosave",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(UserRole.APPLICANT))],
)
async def autosave_application(
    application_id: int,
    body: ApplicationAutosave,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Merge partial form sections into a draft application."""
    app = await app_service.autosave_application(session, user, application_id, body)
    return ApplicationResponse.model_validate(app)


@router.get(
    "/{application_id}/status",
    response_model=ApplicationStatusResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_status(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationStatusResponse:
    """Get aggregated status summary for an application."""
    return await get_application_status(session, user, application_id)


@router.post(
    "/{application_id}/transitions",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def transition_application(
    application_id: int,
    body: TransitionRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    """Request a status change. Role and precondition checks happen in the engine."""
    app, entry = await request_transition(
        session,
        user,
        application_id,
        body.target_status,
        reason=body.reason,
        requirements=body.requirements,
        due_date=body.due_date,
        rejection_category=body.rejection_category,
        appealable=body.appealable,
        expected_version=body.expected_version,
    )
    return TransitionResponse(
        data=ApplicationResponse.model_validate(app),
        history_entry=StatusHistoryItem.model_validate(entry),
    )


@router.get(
    "/{application_id}/history",
    response_model=HistoryResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_history(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> HistoryResponse:
    """Merged activity stream, newest first. Comments are hidden from applicants."""
    events = await get_application_history(session, user, application_id)
    return HistoryResponse(application_id=application_id, count=len(events), events=events)


@router.post(
    "/{application_id}/comments",
    response_model=CommentItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES))],
)
async def create_comment(
    application_id: int,
    body: CommentCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CommentItem:
    comment = await add_comment(session, user, application_id, body.body, is_internal=body.is_internal)
    return CommentItem.model_validate(comment)


@router.post(
    "/{application_id}/documents/{document_name}/verify",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES))],
)
async def verify_document(
    application_id: int,
    document_name: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Mark an uploaded document as verified."""
    app = await app_service.verify_document(session, user, application_id, document_name)
    return ApplicationResponse.model_validate(app)
