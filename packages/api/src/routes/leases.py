# This project was developed with assistance from AI tools.
"""Lease signing routes."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import ClientMeta, CurrentUser, require_roles
from ..schemas.lease import (
    DisclosureItem,
    LeaseSignatureItem,
    LeaseSignRequest,
    LeaseStatusResponse,
    SigningDraftRequest,
    SigningDraftResponse,
)
from ..services.lease import (
    get_lease_status,
    get_signing_draft,
    save_signing_draft,
    sign_lease,
)

router = APIRouter()

_SIGNER_ROLES = (
    UserRole.APPLICANT,
    UserRole.LANDLORD,
    UserRole.PROPERTY_MANAGER,
    UserRole.ADMIN,
)


async def _status_response(session: AsyncSession, user, application_id: int) -> LeaseStatusResponse:
    lease = await get_lease_status(session, user, application_id)
    return LeaseStatusResponse(
        application_id=lease["application_id"],
        lease_signature_status=lease["lease_signature_status"],
        state_code=lease["state_code"],
        disclosures=[DisclosureItem(**d) for d in lease["disclosures"]],
        signatures=[LeaseSignatureItem.model_validate(s) for s in lease["signatures"]],
        next_signer=lease["next_signer"],
        fully_signed_at=lease["fully_signed_at"],
    )


@router.get(
    "/{application_id}/lease",
    response_model=LeaseStatusResponse,
    dependencies=[Depends(require_roles(*_SIGNER_ROLES, UserRole.AGENT))],
)
async def lease_status(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> LeaseStatusResponse:
    """Signature progress plus the disclosures each signer must acknowledge."""
    return await _status_response(session, user, application_id)


@router.post(
    "/{application_id}/lease/sign",
    response_model=LeaseStatusResponse,
    dependencies=[Depends(require_roles(*_SIGNER_ROLES))],
)
async def sign(
    application_id: int,
    body: LeaseSignRequest,
    user: CurrentUser,
    meta: ClientMeta,
    session: AsyncSession = Depends(get_db),
) -> LeaseStatusResponse:
    """Sign the lease as tenant (applicant) or landlord, in that order."""
    await sign_lease(session, user, application_id, body, meta)
    return await _status_response(session, user, application_id)


@router.put(
    "/{application_id}/lease/draft",
    response_model=SigningDraftResponse,
    dependencies=[Depends(require_roles(*_SIGNER_ROLES))],
)
async def save_draft(
    application_id: int,
    body: SigningDraftRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SigningDraftResponse:
    """Autosave the in-progress signing form. Does not sign anything."""
    draft = await save_signing_draft(session, user, application_id, body.form_data)
    return SigningDraftResponse(
        application_id=draft.application_id,
        form_data=draft.form_data,
        saved_at=draft.saved_at,
    )


@router.get(
    "/{application_id}/lease/draft",
    response_model=SigningDraftResponse,
    dependencies=[Depends(require_roles(*_SIGNER_ROLES))],
)
async def load_draft(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SigningDraftResponse:
    draft = await get_signing_draft(session, user, application_id)
    if draft is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No saved signing draft",
        )
    return SigningDraftResponse(
        application_id=draft.application_id,
        form_data=draft.form_data,
        saved_at=draft.saved_at,
    )
