# This project was developed with assistance from AI tools.
"""Payment ledger routes."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.payment import (
    PaymentAttemptCreate,
    PaymentAttemptItem,
    PaymentLedgerResponse,
    PaymentVerificationItem,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
)
from ..services.payments import get_payment_ledger, record_payment_attempt, verify_payment

router = APIRouter()

_REVIEWER_ROLES = (
    UserRole.ADMIN,
    UserRole.LANDLORD,
    UserRole.PROPERTY_MANAGER,
    UserRole.AGENT,
)


@router.get(
    "/{application_id}/payments",
    response_model=PaymentLedgerResponse,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES, UserRole.APPLICANT))],
)
async def get_ledger(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PaymentLedgerResponse:
    """Attempts and manual verifications. Internal notes are hidden from applicants."""
    ledger = await get_payment_ledger(session, user, application_id)
    return PaymentLedgerResponse(
        application_id=ledger["application_id"],
        payment_status=ledger["payment_status"],
        is_paid=ledger["is_paid"],
        attempts=[PaymentAttemptItem.model_validate(a) for a in ledger["attempts"]],
        verifications=[PaymentVerificationItem(**v) for v in ledger["verifications"]],
    )


@router.post(
    "/{application_id}/payments/attempts",
    response_model=PaymentAttemptItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.APPLICANT, UserRole.ADMIN))],
)
async def create_attempt(
    application_id: int,
    body: PaymentAttemptCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PaymentAttemptItem:
    """Record an automated payment attempt outcome."""
    attempt = await record_payment_attempt(session, user, application_id, body)
    return PaymentAttemptItem.model_validate(attempt)


@router.post(
    "/{application_id}/payments/verify",
    response_model=PaymentVerifyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_REVIEWER_ROLES))],
)
async def verify(
    application_id: int,
    body: PaymentVerifyRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PaymentVerifyResponse:
    """Record a manual payment verification. Requires ``confirmed: true``."""
    verification, app = await verify_payment(session, user, application_id, body)
    return PaymentVerifyResponse(
        verification=PaymentVerificationItem.model_validate(verification),
        application_status=app.status,
        payment_status=app.payment_status,
    )
