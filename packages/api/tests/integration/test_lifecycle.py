# This project was developed with assistance from AI tools.
"""Lifecycle against real PostgreSQL: timezone-aware columns, the advisory
lock around audit writes, and version_id conflicts raised by the driver."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from db.enums import ApplicationStatus, LeaseSignatureStatus, PaymentMethod, PaymentStatus
from sqlalchemy import text

from src.core.errors import ConflictError
from src.schemas.lease import LeaseSignRequest
from src.schemas.payment import PaymentVerifyRequest
from src.services.audit import get_events_by_application, verify_audit_chain
from src.services.history import get_application_history
from src.services.lease import sign_lease
from src.services.lifecycle import request_transition
from src.services.payments import verify_payment
from tests.factories import make_application, sign_payload
from tests.functional.personas import applicant_alice, landlord

pytestmark = pytest.mark.integration

S = ApplicationStatus


async def test_payment_to_signed_lease(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)

    _, app = await verify_payment(
        db_session,
        landlord(),
        app.id,
        PaymentVerifyRequest(
            amount=Decimal("45.00"),
            payment_method=PaymentMethod.MONEY_ORDER,
            received_at=datetime(2026, 3, 2, 15, 0, tzinfo=UTC),
            confirmed=True,
        ),
    )
    assert app.status == S.SUBMITTED
    assert app.payment_status == PaymentStatus.MANUALLY_VERIFIED

    await request_transition(db_session, landlord(), app.id, S.UNDER_REVIEW)
    app, _ = await request_transition(db_session, landlord(), app.id, S.APPROVED)
    assert app.lease_signature_status == LeaseSignatureStatus.UNSIGNED

    await sign_lease(db_session, applicant_alice(), app.id, LeaseSignRequest(**sign_payload("CA")))
    app, signature = await sign_lease(
        db_session, landlord(), app.id, LeaseSignRequest(**sign_payload("CA", "Dana Reyes"))
    )
    assert app.lease_signature_status == LeaseSignatureStatus.SIGNED
    assert app.lease_fully_signed_at.tzinfo is not None
    assert "rent_control" in signature.disclosure_ids

    history = await get_application_history(db_session, landlord(), app.id)
    assert history[0].timestamp >= history[-1].timestamp

    events = await get_events_by_application(db_session, app.id)
    assert [e.event_type for e in events][-2:] == ["lease_signed_tenant", "lease_signed_landlord"]

    chain = await verify_audit_chain(db_session, app.id)
    assert chain["status"] == "OK"


async def test_stale_version_is_a_conflict(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED)
    await db_session.execute(
        text("UPDATE applications SET version = version + 1 WHERE id = :id"), {"id": app.id}
    )
    await db_session.commit()

    with pytest.raises(ConflictError):
        await request_transition(db_session, landlord(), app.id, S.UNDER_REVIEW)


async def test_audit_tamper_detected(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED)
    await request_transition(db_session, landlord(), app.id, S.UNDER_REVIEW)
    await request_transition(db_session, landlord(), app.id, S.INFO_REQUESTED, reason="pay stubs")
    app_id = app.id
    first_id, second_id = [e.id for e in await get_events_by_application(db_session, app_id)]

    await db_session.execute(
        text("UPDATE audit_events SET event_data = CAST(:data AS JSON) WHERE id = :id"),
        {"data": '{"from": "submitted", "to": "approved"}', "id": first_id},
    )
    db_session.expire_all()

    chain = await verify_audit_chain(db_session, app_id)
    assert chain["status"] == "TAMPERED"
    assert chain["first_break_id"] == second_id
