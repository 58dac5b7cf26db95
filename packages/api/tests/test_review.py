# This project was developed with assistance from AI tools.
"""Tests for persisting reviewer scores."""

import pytest
from db.enums import ApplicationStatus

from src.core.errors import UnauthorizedError, ValidationFailedError
from src.services.audit import get_events_by_application
from src.services.review import score_application
from src.services.scoring import MAX_SCORE
from tests.factories import make_application, strong_form
from tests.functional.personas import AGENT_USER_ID, agent, applicant_alice

S = ApplicationStatus


async def test_score_is_persisted_with_breakdown(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED, **strong_form())

    scored, breakdown = await score_application(db_session, agent(), app.id)

    assert breakdown.total_score == MAX_SCORE
    assert scored.score == MAX_SCORE
    assert scored.score_breakdown["flags"] == []
    assert scored.scored_by == AGENT_USER_ID
    assert scored.scored_at is not None
    (event,) = await get_events_by_application(db_session, app.id, event_type="score_calculated")
    assert event.event_data["total_score"] == MAX_SCORE


async def test_rescoring_replaces_snapshot(db_session, listing):
    form = strong_form()
    form["personal_info"]["credit_tier"] = "poor"
    app = await make_application(db_session, listing, status=S.UNDER_REVIEW, **form)

    _, first = await score_application(db_session, agent(), app.id)
    app.personal_info = {**app.personal_info, "credit_tier": "excellent"}
    await db_session.commit()
    _, second = await score_application(db_session, agent(), app.id)

    assert second.total_score == first.total_score + 20
    assert "poor_credit" not in app.score_breakdown["flags"]


async def test_draft_cannot_be_scored(db_session, listing):
    app = await make_application(db_session, listing, **strong_form())
    with pytest.raises(ValidationFailedError):
        await score_application(db_session, agent(), app.id)


async def test_applicant_cannot_score(db_session, listing):
    app = await make_application(db_session, listing, status=S.SUBMITTED)
    with pytest.raises(UnauthorizedError):
        await score_application(db_session, applicant_alice(), app.id)
