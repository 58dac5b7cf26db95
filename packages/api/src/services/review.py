# This project was developed with assistance from AI tools.
"""Reviewer scoring action.

Builds a frozen snapshot from the application, runs the pure scoring
engine, and persists the breakdown as a point-in-time value. Later form
edits do not invalidate it; reviewers rescore explicitly.
"""

import logging
from datetime import UTC, datetime

from db import Application
from db.enums import ApplicationStatus, UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import UnauthorizedError, ValidationFailedError
from ..schemas.auth import UserContext
from ..schemas.scoring import ScoreBreakdown
from .application import commit_or_conflict, flush_or_conflict, require_application
from .audit import write_audit_event
from .scoring import build_snapshot, calculate_score

logger = logging.getLogger(__name__)


async def score_application(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> tuple[Application, ScoreBreakdown]:
    """Compute and persist the score breakdown for an application.

    Raises:
        ApplicationNotFoundError: Missing or out of the caller's scope.
        UnauthorizedError: Caller is not a reviewer.
        ValidationFailedError: Application is still a draft.
    """
    app = await require_application(session, user, application_id)
    if user.role not in UserRole.reviewer_roles():
        raise UnauthorizedError("Only reviewers can score applications.")
    if app.status == ApplicationStatus.DRAFT:
        raise ValidationFailedError("Draft applications cannot be scored.")

    breakdown = calculate_score(
        build_snapshot(app),
        income_ratio_threshold=settings.INCOME_RATIO_THRESHOLD,
    )
    now = datetime.now(UTC)
    app.score = breakdown.total_score
    app.score_breakdown = breakdown.model_dump()
    app.scored_at = now
    app.scored_by = user.user_id
    await flush_or_conflict(session, app.id)

    await write_audit_event(
        session,
        event_type="score_calculated",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={
            "total_score": breakdown.total_score,
            "max_score": breakdown.max_score,
            "flags": list(breakdown.flags),
        },
    )
    await commit_or_conflict(session, app.id)
    logger.info(
        "Application %s scored %d/%d by %s", app.id, breakdown.total_score, breakdown.max_score, user.user_id
    )
    return app, breakdown
