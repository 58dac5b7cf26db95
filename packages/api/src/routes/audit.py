# This project was developed with assistance from AI tools.
"""Admin audit trail query and chain verification endpoints."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.audit import (
    AuditByApplicationResponse,
    AuditChainVerifyResponse,
    AuditEventItem,
)
from ..services.audit import get_events_by_application, verify_audit_chain

router = APIRouter()


@router.get(
    "/application/{application_id}",
    response_model=AuditByApplicationResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def audit_by_application(
    application_id: int,
    event_type: str | None = Query(default=None, description="Filter by event type"),
    session: AsyncSession = Depends(get_db),
) -> AuditByApplicationResponse:
    """Audit events for one application, in write order."""
    events = await get_events_by_application(session, application_id, event_type=event_type)
    return AuditByApplicationResponse(
        application_id=application_id,
        count=len(events),
        events=[AuditEventItem.model_validate(e) for e in events],
    )


@router.get(
    "/application/{application_id}/verify",
    response_model=AuditChainVerifyResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def audit_verify(
    application_id: int,
    session: AsyncSession = Depends(get_db),
) -> AuditChainVerifyResponse:
    """Walk one application's hash chain and report the first tampered event, if any."""
    result = await verify_audit_chain(session, application_id)
    return AuditChainVerifyResponse(application_id=application_id, **result)
