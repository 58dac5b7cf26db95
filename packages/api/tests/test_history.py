# This project was developed with assistance from AI tools.
"""Tests for the merged application history stream and comments."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from db import ApplicationComment, StatusHistoryEntry
from db.enums import ApplicationStatus, PaymentAttemptStatus, PaymentMethod

from src.core.errors import UnauthorizedError
from src.schemas.payment import PaymentAttemptCreate, PaymentVerifyRequest
from src.services.history import add_comment, as_utc, get_application_history
from src.services.lifecycle import request_transition
from src.services.payments import record_payment_attempt, verify_payment
from tests.factories import make_application, strong_form
from tests.functional.personas import applicant_alice, landlord

S = ApplicationStatus


async def _busy_application(session, listing):
    """Draft -> pending_payment, one failed attempt, manual verification, a comment."""
    app = await make_application(session, listing, **strong_form())
    await request_transition(session, applicant_alice(), app.id, S.PENDING_PAYMENT)
    await record_payment_attempt(
        session,
        applicant_alice(),
        app.id,
        PaymentAttemptCreate(
            reference_id="pi_1", status=PaymentAttemptStatus.FAILED, amount=Decimal("45"), error_message="declined"
        ),
    )
    await verify_payment(
        session,
        landlord(),
        app.id,
        PaymentVerifyRequest(
            amount=Decimal("45"),
            payment_method=PaymentMethod.MONEY_ORDER,
            received_at=datetime(2026, 5, 1, tzinfo=UTC),
            confirmed=True,
            internal_note="Dropped at office",
        ),
    )
    await add_comment(session, landlord(), app.id, "Strong references", is_internal=True)
    return app


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


async def test_history_is_newest_first(db_session, listing):
    app = await _busy_application(db_session, listing)

    events = await get_application_history(db_session, landlord(), app.id)

    timestamps = [e.timestamp for e in events]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {e.event_type for e in events} == {
        "status_change",
        "payment_attempt",
        "payment_verification",
        "comment",
    }
    assert events[-1].status == S.PENDING_PAYMENT.value


async def test_reviewer_sees_comments_and_notes(db_session, listing):
    app = await _busy_application(db_session, listing)

    events = await get_application_history(db_session, landlord(), app.id)

    comment = next(e for e in events if e.event_type == "comment")
    assert comment.details["body"] == "Strong references"
    verification = next(e for e in events if e.event_type == "payment_verification")
    assert verification.details["internal_note"] == "Dropped at office"


async def test_applicant_never_sees_comments_or_notes(db_session, listing):
    app = await _busy_application(db_session, listing)

    events = await get_application_history(db_session, applicant_alice(), app.id)

    assert all(e.event_type != "comment" for e in events)
    verification = next(e for e in events if e.event_type == "payment_verification")
    assert verification.details["internal_note"] is None


async def test_history_is_stable_across_reads(db_session, listing):
    app = await _busy_application(db_session, listing)
    first = await get_application_history(db_session, landlord(), app.id)
    second = await get_application_history(db_session, landlord(), app.id)
    assert first == second


async def test_identical_timestamps_break_ties_by_source(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED)
    instant = datetime(2026, 4, 1, 9, 30, tzinfo=UTC)
    db_session.add_all(
        [
            StatusHistoryEntry(
                application_id=app.id, status=S.SUBMITTED, changed_at=instant, changed_by="system"
            ),
            ApplicationComment(
                application_id=app.id, author_id=landlord().user_id, body="same instant", created_at=instant
            ),
        ]
    )
    await db_session.commit()

    events = await get_application_history(db_session, landlord(), app.id)

    assert [e.event_type for e in events] == ["comment", "status_change"]


async def test_payment_sorts_below_the_transitions_it_triggers(db_session, listing):
    app = await make_application(db_session, listing, status=S.PENDING_PAYMENT)
    await verify_payment(
        db_session,
        landlord(),
        app.id,
        PaymentVerifyRequest(
            amount=Decimal("45"),
            payment_method=PaymentMethod.CHECK,
            received_at=datetime(2026, 5, 1, tzinfo=UTC),
            confirmed=True,
        ),
    )

    events = await get_application_history(db_session, landlord(), app.id)

    assert len({e.timestamp for e in events}) == 1
    assert [(e.event_type, e.status) for e in events] == [
        ("status_change", S.SUBMITTED.value),
        ("status_change", S.PAYMENT_VERIFIED.value),
        ("payment_verification", "verified"),
    ]


async def test_applicant_cannot_comment(db_session, listing):
    app = await make_application(db_session, listing)
    with pytest.raises(UnauthorizedError):
        await add_comment(db_session, applicant_alice(), app.id, "hello")
