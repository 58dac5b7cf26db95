# This project was developed with assistance from AI tools.
"""Two-party lease signing.

Available once an application is approved. Signature order is data
(``SIGNING_SEQUENCE``): each party signs exactly once, in sequence, and
the aggregate status moves unsigned -> partially_signed -> signed.
Signatures are never overwritten.

Checks run in a fixed order: application approved, signer role, already
signed, out-of-order party, then input validation.
"""

import logging
from datetime import UTC, datetime

from db import Application, LeaseSignature, LeaseSigningDraft
from db.enums import ApplicationStatus, LeaseSignatureStatus, SignerRole, UserRole
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import (
    AlreadySignedError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationFailedError,
)
from ..schemas.auth import RequestMeta, UserContext
from ..schemas.lease import LeaseSignRequest
from .application import commit_or_conflict, flush_or_conflict, require_application
from .audit import write_audit_event
from .disclosures import disclosure_registry, normalize_state_code
from .notifications import notify_lease_signed

logger = logging.getLogger(__name__)

SIGNING_SEQUENCE: tuple[SignerRole, ...] = (SignerRole.TENANT, SignerRole.LANDLORD)

_SIGNER_ROLES: dict[UserRole, SignerRole] = {
    UserRole.APPLICANT: SignerRole.TENANT,
    UserRole.LANDLORD: SignerRole.LANDLORD,
    UserRole.PROPERTY_MANAGER: SignerRole.LANDLORD,
    UserRole.ADMIN: SignerRole.LANDLORD,
}


def signer_role_for(role: UserRole) -> SignerRole | None:
    return _SIGNER_ROLES.get(role)


def next_signer(signed_roles: set[SignerRole]) -> SignerRole | None:
    """First party in the sequence that has not signed yet."""
    for role in SIGNING_SEQUENCE:
        if role not in signed_roles:
            return role
    return None


async def list_signatures(session: AsyncSession, application_id: int) -> list[LeaseSignature]:
    result = await session.execute(
        select(LeaseSignature)
        .where(LeaseSignature.application_id == application_id)
        .order_by(LeaseSignature.signed_at.asc(), LeaseSignature.id.asc())
    )
    return list(result.scalars().all())


def _require_signing_open(app: Application) -> None:
    if app.status != ApplicationStatus.APPROVED:
        raise InvalidTransitionError(
            f"Lease signing is only available for approved applications (current status '{app.status.value}')."
        )


def _validate_signature_input(data: LeaseSignRequest, state_code: str | None) -> None:
    if len(data.signer_name.strip()) < settings.SIGNER_NAME_MIN_LENGTH:
        raise ValidationFailedError("Signer name is required.")
    if len(data.signature_data) < settings.SIGNATURE_MIN_LENGTH:
        raise ValidationFailedError("Signature image is missing or too small.")
    missing = [
        disclosure_id
        for disclosure_id in disclosure_registry.required_ids(state_code)
        if data.acknowledgments.get(disclosure_id) is not True
    ]
    if missing:
        raise ValidationFailedError(f"All disclosures must be acknowledged. Missing: {', '.join(missing)}.")


async def sign_lease(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    data: LeaseSignRequest,
    meta: RequestMeta | None = None,
) -> tuple[Application, LeaseSignature]:
    """Record one party's signature.

    Raises:
        InvalidTransitionError: Application not approved, or party out of order.
        UnauthorizedError: Caller's role has no signing party, or a tenant
            signing someone else's application.
        AlreadySignedError: Lease fully signed, or this party already signed.
        ValidationFailedError: Empty name, small signature, unacknowledged
            disclosure.
    """
    meta = meta or RequestMeta()
    app = await require_application(session, user, application_id)
    _require_signing_open(app)

    signer_role = signer_role_for(user.role)
    if signer_role is None:
        raise UnauthorizedError(f"Role '{user.role.value}' cannot sign leases.")
    if signer_role == SignerRole.TENANT and app.applicant_user_id != user.user_id:
        raise UnauthorizedError("Only the applicant can sign as tenant.")

    signatures = await list_signatures(session, app.id)
    signed_roles = {s.signer_role for s in signatures}
    if app.lease_signature_status == LeaseSignatureStatus.SIGNED or signer_role in signed_roles:
        raise AlreadySignedError(f"The {signer_role.value} has already signed this lease.")

    expected = next_signer(signed_roles)
    if signer_role != expected:
        raise InvalidTransitionError(
            f"The {expected.value} must sign the lease before the {signer_role.value}."
        )

    state_code = normalize_state_code(app.state_code)
    _validate_signature_input(data, state_code)

    now = datetime.now(UTC)
    signature = LeaseSignature(
        application_id=app.id,
        signer_role=signer_role,
        signer_user_id=user.user_id,
        signer_name=data.signer_name.strip(),
        signature_data=data.signature_data,
        acknowledgments=dict(data.acknowledgments),
        disclosure_ids=disclosure_registry.required_ids(state_code),
        state_code=state_code,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
        signed_at=now,
    )
    session.add(signature)

    fully_signed = next_signer(signed_roles | {signer_role}) is None
    if fully_signed:
        app.lease_signature_status = LeaseSignatureStatus.SIGNED
        app.lease_fully_signed_at = now
    else:
        app.lease_signature_status = LeaseSignatureStatus.PARTIALLY_SIGNED

    try:
        await flush_or_conflict(session, app.id)
    except IntegrityError as exc:
        await session.rollback()
        raise AlreadySignedError(f"The {signer_role.value} has already signed this lease.") from exc

    await write_audit_event(
        session,
        event_type=f"lease_signed_{signer_role.value}",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={
            "signer_role": signer_role.value,
            "lease_signature_status": app.lease_signature_status.value,
            "state_code": state_code,
            "ip_address": meta.ip_address,
        },
    )
    await commit_or_conflict(session, app.id)
    logger.info(
        "Lease for application %s signed by %s (%s); status %s",
        app.id,
        user.user_id,
        signer_role.value,
        app.lease_signature_status.value,
    )
    await notify_lease_signed(app.id, fully_signed)
    return app, signature


async def get_lease_status(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> dict:
    app = await require_application(session, user, application_id)
    signatures = await list_signatures(session, app.id)
    state_code = normalize_state_code(app.state_code)
    pending = None
    if app.status == ApplicationStatus.APPROVED:
        pending = next_signer({s.signer_role for s in signatures})
    return {
        "application_id": app.id,
        "lease_signature_status": app.lease_signature_status,
        "state_code": state_code,
        "disclosures": disclosure_registry.required(state_code),
        "signatures": signatures,
        "next_signer": pending,
        "fully_signed_at": app.lease_fully_signed_at,
    }


async def _find_draft(session: AsyncSession, application_id: int, user_id: str) -> LeaseSigningDraft | None:
    result = await session.execute(
        select(LeaseSigningDraft).where(
            LeaseSigningDraft.application_id == application_id,
            LeaseSigningDraft.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def save_signing_draft(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    form_data: dict,
) -> LeaseSigningDraft:
    """Upsert the caller's in-progress signing form.

    Advisory only: the signature state machine is not touched.
    """
    app = await require_application(session, user, application_id)
    _require_signing_open(app)
    if app.lease_signature_status == LeaseSignatureStatus.SIGNED:
        raise AlreadySignedError("The lease is already fully signed.")

    draft = await _find_draft(session, app.id, user.user_id)
    if draft is None:
        draft = LeaseSigningDraft(application_id=app.id, user_id=user.user_id, form_data=form_data)
        session.add(draft)
    else:
        draft.form_data = form_data
        draft.saved_at = datetime.now(UTC)
    await session.commit()
    return draft


async def get_signing_draft(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> LeaseSigningDraft | None:
    app = await require_application(session, user, application_id)
    return await _find_draft(session, app.id, user.user_id)
