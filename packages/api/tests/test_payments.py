# This project was developed with assistance from AI tools.
"""Tests for the payment verification ledger."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from db.enums import ApplicationStatus, PaymentAttemptStatus, PaymentMethod, PaymentStatus

from src.core.config import settings
from src.core.errors import (
    AlreadyVerifiedError,
    DuplicateReferenceError,
    UnauthorizedError,
    ValidationFailedError,
)
from src.schemas.payment import PaymentAttemptCreate, PaymentVerifyRequest
from src.services.application import get_status_history
from src.services.ledger import is_paid, list_attempts, list_verifications
from src.services.payments import get_payment_ledger, record_payment_attempt, verify_payment
from tests.factories import make_application
from tests.functional.personas import admin, applicant_alice, landlord

S = ApplicationStatus


def _check_payment(**overrides) -> PaymentVerifyRequest:
    values = {
        "amount": Decimal("45.00"),
        "payment_method": PaymentMethod.CHECK,
        "received_at": datetime(2026, 3, 2, 15, 0, tzinfo=UTC),
        "confirmed": True,
    }
    values.update(overrides)
    return PaymentVerifyRequest(**values)


def _attempt(reference_id="pi_001", status=PaymentAttemptStatus.FAILED, **overrides) -> PaymentAttemptCreate:
    values = {"reference_id": reference_id, "status": status, "amount": Decimal("45.00")}
    values.update(overrides)
    return PaymentAttemptCreate(**values)


# ---------------------------------------------------------------------------
# Manual verification
# ---------------------------------------------------------------------------


async def test_manual_verification_advances_to_submitted(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    verification, updated = await verify_payment(db_session, landlord(), app.id, _check_payment())

    assert verification.reference_id.startswith("MV-")
    assert verification.verified_by == landlord().user_id
    assert verification.confirmation_checked is True
    assert updated.payment_status == PaymentStatus.MANUALLY_VERIFIED
    assert updated.status == S.SUBMITTED
    assert updated.submitted_at is not None
    history = await get_status_history(db_session, app.id)
    assert [h.status for h in history] == [S.PAYMENT_VERIFIED, S.SUBMITTED]
    assert history[1].changed_by == "system"


async def test_auto_submit_can_be_disabled(db_session, listing, monkeypatch):
    monkeypatch.setattr(settings, "AUTO_SUBMIT_ON_PAYMENT", False)
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    _, updated = await verify_payment(db_session, landlord(), app.id, _check_payment())

    assert updated.status == S.PAYMENT_VERIFIED


async def test_verifying_already_paid_application_fails(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED, payment_status=PaymentStatus.PAID)

    with pytest.raises(AlreadyVerifiedError):
        await verify_payment(db_session, landlord(), app.id, _check_payment())
    assert await list_verifications(db_session, app.id) == []


async def test_second_manual_verification_fails(db_session, listing):
    app = await make_application(db_session, listing, status=S.DRAFT)
    await verify_payment(db_session, landlord(), app.id, _check_payment(reference_id="CHK-1"))

    with pytest.raises(AlreadyVerifiedError):
        await verify_payment(db_session, landlord(), app.id, _check_payment(reference_id="CHK-2"))
    assert len(await list_verifications(db_session, app.id)) == 1
    assert app.status == S.DRAFT


async def test_verification_requires_confirmation(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    with pytest.raises(ValidationFailedError, match="confirmed"):
        await verify_payment(db_session, landlord(), app.id, _check_payment(confirmed=False))
    assert app.payment_status == PaymentStatus.UNPAID


async def test_verification_reports_missing_fields(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    with pytest.raises(ValidationFailedError, match="amount, payment_method"):
        await verify_payment(db_session, landlord(), app.id, _check_payment(amount=None, payment_method=None))


async def test_verification_rejects_non_positive_amount(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    with pytest.raises(ValidationFailedError):
        await verify_payment(db_session, landlord(), app.id, _check_payment(amount=Decimal("0")))


async def test_applicant_cannot_verify_payment(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    with pytest.raises(UnauthorizedError):
        await verify_payment(db_session, applicant_alice(), app.id, _check_payment())


async def test_verification_reference_must_be_unique(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    await record_payment_attempt(db_session, applicant_alice(), app.id, _attempt("REF-9"))

    with pytest.raises(DuplicateReferenceError):
        await verify_payment(db_session, landlord(), app.id, _check_payment(reference_id="REF-9"))


# ---------------------------------------------------------------------------
# Automated attempts
# ---------------------------------------------------------------------------


async def test_failed_attempt_is_recorded_but_not_paid(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    attempt = await record_payment_attempt(
        db_session, applicant_alice(), app.id, _attempt(error_message="card_declined")
    )

    assert attempt.status == PaymentAttemptStatus.FAILED
    assert app.payment_status == PaymentStatus.FAILED
    assert app.status == S.PENDING_PAYMENT
    assert await is_paid(db_session, app.id) is False


async def test_duplicate_attempt_reference_is_rejected(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    await record_payment_attempt(db_session, applicant_alice(), app.id, _attempt("pi_dup"))

    with pytest.raises(DuplicateReferenceError):
        await record_payment_attempt(db_session, applicant_alice(), app.id, _attempt("pi_dup"))
    assert len(await list_attempts(db_session, app.id)) == 1


async def test_applicant_cannot_record_success(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    with pytest.raises(UnauthorizedError):
        await record_payment_attempt(
            db_session, applicant_alice(), app.id, _attempt(status=PaymentAttemptStatus.SUCCESS)
        )


async def test_successful_attempt_advances_application(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    await record_payment_attempt(db_session, admin(), app.id, _attempt(status=PaymentAttemptStatus.SUCCESS))

    assert app.payment_status == PaymentStatus.PAID
    assert app.status == S.SUBMITTED
    history = await get_status_history(db_session, app.id)
    assert all(h.changed_by == "system" for h in history)


async def test_later_failure_does_not_unpay(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    await record_payment_attempt(db_session, admin(), app.id, _attempt("pi_ok", PaymentAttemptStatus.SUCCESS))
    await record_payment_attempt(db_session, admin(), app.id, _attempt("pi_bad", PaymentAttemptStatus.FAILED))

    assert app.payment_status == PaymentStatus.PAID
    assert await is_paid(db_session, app.id) is True


# ---------------------------------------------------------------------------
# Ledger view
# ---------------------------------------------------------------------------


async def test_ledger_hides_internal_note_from_applicant(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    await verify_payment(db_session, landlord(), app.id, _check_payment(internal_note="Check #4411"))

    reviewer_view = await get_payment_ledger(db_session, landlord(), app.id)
    applicant_view = await get_payment_ledger(db_session, applicant_alice(), app.id)

    assert reviewer_view["verifications"][0]["internal_note"] == "Check #4411"
    assert applicant_view["verifications"][0]["internal_note"] is None
    assert applicant_view["is_paid"] is True
