# This project was developed with assistance from AI tools.
"""Tests for the application status summary."""

from db.enums import ApplicationStatus, LeaseSignatureStatus, PaymentStatus

from src.schemas.requirement import RequirementInput
from src.services.lifecycle import request_transition
from src.services.status import STATUS_INFO, get_application_status
from tests.factories import make_application
from tests.functional.personas import applicant_alice, landlord

S = ApplicationStatus


def test_all_statuses_have_info():
    for status in ApplicationStatus:
        info = STATUS_INFO[status]
        assert info.label
        assert info.description


async def test_pending_payment_asks_applicant_to_pay(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    summary = await get_application_status(db_session, applicant_alice(), app.id)

    assert summary.status == "pending_payment"
    assert summary.is_paid is False
    assert summary.allowed_next_statuses == ["payment_verified", "withdrawn"]
    assert [a.action_type for a in summary.pending_actions] == ["pay_fee"]


async def test_reviewer_sees_review_targets(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED, payment_status=PaymentStatus.PAID)

    summary = await get_application_status(db_session, landlord(), app.id)

    assert summary.allowed_next_statuses == ["under_review", "approved", "rejected"]
    assert summary.pending_actions == []


async def test_conditional_approval_counts_outstanding(db_session, listing):
    app = await make_application(db_session, listing, status=S.UNDER_REVIEW)
    await request_transition(
        db_session,
        landlord(),
        app.id,
        S.CONDITIONAL_APPROVAL,
        requirements=[RequirementInput(description="Guarantor form"), RequirementInput(description="Pet deposit")],
    )

    summary = await get_application_status(db_session, applicant_alice(), app.id)

    assert summary.outstanding_requirement_count == 2
    assert summary.pending_actions[0].action_type == "satisfy_requirements"


async def test_approved_unsigned_prompts_signing(db_session, listing):
    app = await make_application(db_session, listing, status=S.APPROVED)

    summary = await get_application_status(db_session, applicant_alice(), app.id)

    assert summary.lease_signature_status == LeaseSignatureStatus.UNSIGNED
    assert summary.allowed_next_statuses == []
    assert [a.action_type for a in summary.pending_actions] == ["sign_lease"]


async def test_signed_lease_has_no_pending_actions(db_session, listing):
    app = await make_application(
        db_session, listing, status=S.APPROVED, lease_signature_status=LeaseSignatureStatus.SIGNED
    )
    summary = await get_application_status(db_session, applicant_alice(), app.id)
    assert summary.pending_actions == []
