# This project was developed with assistance from AI tools.
"""Payment verification ledger operations.

Two append-only collections per application: automated payment attempts
and reviewer-entered manual verifications. Rows are never updated; the
application's ``payment_status`` is a denormalized summary.

A manual verification or a successful attempt on an application still
in ``pending_payment`` also drives it to ``payment_verified`` and, when
AUTO_SUBMIT_ON_PAYMENT is on, on to ``submitted`` as the system actor,
in the same transaction.
"""

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from db import Application, PaymentAttempt, PaymentVerification
from db.enums import ApplicationStatus, PaymentAttemptStatus, PaymentStatus, UserRole
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import system_user
from ..core.config import settings
from ..core.errors import (
    AlreadyVerifiedError,
    DuplicateReferenceError,
    UnauthorizedError,
    ValidationFailedError,
)
from ..schemas.auth import UserContext
from ..schemas.payment import PaymentAttemptCreate, PaymentVerifyRequest
from .application import commit_or_conflict, flush_or_conflict, require_application
from .audit import write_audit_event
from .ledger import is_paid, list_attempts, list_verifications, reference_exists
from .lifecycle import apply_transition
from .notifications import notify_status_changed

logger = logging.getLogger(__name__)

# Roles allowed to record a successful automated attempt (gateway callbacks).
_SUCCESS_RECORDERS = frozenset({UserRole.SYSTEM, UserRole.ADMIN})
_APPLICANT_ATTEMPT_STATUSES = frozenset({PaymentAttemptStatus.PENDING, PaymentAttemptStatus.FAILED})
_PAID_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.MANUALLY_VERIFIED})


def _generate_reference_id() -> str:
    return f"MV-{datetime.now(UTC):%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8].upper()}"


async def _advance_after_payment(
    session: AsyncSession,
    app: Application,
    verifier: UserContext,
    reason: str,
    now: datetime,
) -> list[tuple[ApplicationStatus, ApplicationStatus, UserContext]]:
    """Drive pending_payment -> payment_verified (-> submitted). Does not commit.

    Returns (source, target, actor) for each transition applied so the
    caller can notify after commit.
    """
    applied: list[tuple[ApplicationStatus, ApplicationStatus, UserContext]] = []
    if app.status != ApplicationStatus.PENDING_PAYMENT:
        return applied

    await apply_transition(session, app, ApplicationStatus.PAYMENT_VERIFIED, verifier, reason=reason, now=now)
    applied.append((ApplicationStatus.PENDING_PAYMENT, ApplicationStatus.PAYMENT_VERIFIED, verifier))

    if settings.AUTO_SUBMIT_ON_PAYMENT:
        system = system_user()
        await apply_transition(
            session,
            app,
            ApplicationStatus.SUBMITTED,
            system,
            reason="Submitted automatically after payment verification",
            now=now,
        )
        applied.append((ApplicationStatus.PAYMENT_VERIFIED, ApplicationStatus.SUBMITTED, system))
    return applied


async def _notify_chain(
    application_id: int,
    applied: list[tuple[ApplicationStatus, ApplicationStatus, UserContext]],
) -> None:
    for source, target, actor in applied:
        await notify_status_changed(application_id, source, target, actor.user_id)


async def get_payment_ledger(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> dict:
    """Both ledger collections plus the paid predicate.

    Internal notes on verifications are blanked for applicants.
    """
    app = await require_application(session, user, application_id)
    attempts = await list_attempts(session, app.id)
    verifications = await list_verifications(session, app.id)
    hide_notes = user.role == UserRole.APPLICANT
    return {
        "application_id": app.id,
        "payment_status": app.payment_status,
        "is_paid": await is_paid(session, app.id),
        "attempts": attempts,
        "verifications": [
            {
                "id": v.id,
                "reference_id": v.reference_id,
                "amount": v.amount,
                "payment_method": v.payment_method,
                "received_at": v.received_at,
                "verified_by": v.verified_by,
                "verified_at": v.verified_at,
                "internal_note": None if hide_notes else v.internal_note,
            }
            for v in verifications
        ],
    }


async def record_payment_attempt(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    data: PaymentAttemptCreate,
) -> PaymentAttempt:
    """Append an automated payment attempt.

    A failed attempt is a recorded ledger outcome, not an error: it leaves
    the paid predicate unchanged.
    """
    app = await require_application(session, user, application_id)
    if user.role == UserRole.APPLICANT:
        if data.status not in _APPLICANT_ATTEMPT_STATUSES:
            raise UnauthorizedError("Applicants cannot record a successful payment.")
    elif user.role not in _SUCCESS_RECORDERS:
        raise UnauthorizedError("Only the payment processor can record payment attempts.")

    if await reference_exists(session, app.id, data.reference_id):
        raise DuplicateReferenceError(f"Payment reference '{data.reference_id}' is already recorded.")

    now = datetime.now(UTC)
    attempt = PaymentAttempt(
        application_id=app.id,
        reference_id=data.reference_id,
        status=data.status,
        amount=data.amount,
        error_message=data.error_message,
        recorded_by=user.user_id,
        attempted_at=now,
    )
    session.add(attempt)

    if data.status == PaymentAttemptStatus.SUCCESS:
        app.payment_status = PaymentStatus.PAID
    elif app.payment_status not in _PAID_STATUSES:
        app.payment_status = (
            PaymentStatus.FAILED if data.status == PaymentAttemptStatus.FAILED else PaymentStatus.PENDING
        )
    app.updated_at = now

    try:
        await flush_or_conflict(session, app.id)
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateReferenceError(f"Payment reference '{data.reference_id}' is already recorded.") from exc

    await write_audit_event(
        session,
        event_type="payment_attempt",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={
            "reference_id": data.reference_id,
            "status": data.status.value,
            "amount": str(data.amount),
            "error_message": data.error_message,
        },
    )
    applied: list = []
    if data.status == PaymentAttemptStatus.SUCCESS:
        applied = await _advance_after_payment(
            session,
            app,
            system_user(),
            f"Payment {data.reference_id} succeeded. Amount: ${data.amount}",
            now,
        )
    await commit_or_conflict(session, app.id)
    logger.info(
        "Payment attempt %s (%s) recorded for application %s", data.reference_id, data.status.value, app.id
    )
    await _notify_chain(app.id, applied)
    return attempt


def _validate_verification(data: PaymentVerifyRequest) -> None:
    if data.confirmed is not True:
        raise ValidationFailedError("Payment verification must be explicitly confirmed.")
    missing = [
        name
        for name, value in (
            ("amount", data.amount),
            ("payment_method", data.payment_method),
            ("received_at", data.received_at),
        )
        if value is None
    ]
    if missing:
        raise ValidationFailedError(f"Missing required fields: {', '.join(missing)}.")
    if data.amount <= Decimal("0"):
        raise ValidationFailedError("Amount must be greater than zero.")


async def verify_payment(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    data: PaymentVerifyRequest,
) -> tuple[PaymentVerification, Application]:
    """Record a reviewer's manual payment verification.

    Raises:
        UnauthorizedError: Caller is not a reviewer.
        ValidationFailedError: Not confirmed, or a required field is missing.
        AlreadyVerifiedError: The application is already paid; ledger unchanged.
        DuplicateReferenceError: Supplied reference id is already in the ledger.
    """
    app = await require_application(session, user, application_id)
    if user.role not in UserRole.reviewer_roles():
        raise UnauthorizedError("Only reviewers can verify payments.")
    _validate_verification(data)

    if app.payment_status in _PAID_STATUSES or await is_paid(session, app.id):
        raise AlreadyVerifiedError(f"Application {app.id} payment is already verified.")

    reference_id = data.reference_id or _generate_reference_id()
    if await reference_exists(session, app.id, reference_id):
        raise DuplicateReferenceError(f"Payment reference '{reference_id}' is already recorded.")

    now = datetime.now(UTC)
    verification = PaymentVerification(
        application_id=app.id,
        reference_id=reference_id,
        amount=data.amount,
        payment_method=data.payment_method,
        received_at=data.received_at,
        verified_by=user.user_id,
        verified_at=now,
        internal_note=data.internal_note,
        confirmation_checked=True,
    )
    session.add(verification)
    app.payment_status = PaymentStatus.MANUALLY_VERIFIED
    app.updated_at = now

    try:
        await flush_or_conflict(session, app.id)
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateReferenceError(f"Payment reference '{reference_id}' is already recorded.") from exc

    await write_audit_event(
        session,
        event_type="payment_verify_manual",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={
            "reference_id": reference_id,
            "amount": str(data.amount),
            "payment_method": data.payment_method.value,
            "received_at": data.received_at.isoformat(),
        },
    )

    applied = await _advance_after_payment(
        session,
        app,
        user,
        f"Manual payment verified via {data.payment_method.value}. Amount: ${data.amount}",
        now,
    )
    await commit_or_conflict(session, app.id)
    logger.info("Payment %s manually verified for application %s by %s", reference_id, app.id, user.user_id)
    await _notify_chain(app.id, applied)
    return verification, app
