# This project was developed with assistance from AI tools.
"""Merged per-application activity history.

Four append-only sources (status changes, payment attempts, manual
verifications, comments) are merged into one stream, newest first.
Visibility filtering happens here at read time: applicants never see
comments or verification internal notes, although both stay in storage.
"""

import logging
from datetime import UTC, datetime

from db import ApplicationComment
from db.enums import UserRole
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import UnauthorizedError
from ..schemas.auth import UserContext
from ..schemas.history import HistoryEvent
from .application import get_status_history, require_application
from .audit import write_audit_event
from .ledger import list_attempts, list_verifications

logger = logging.getLogger(__name__)

# Tiebreak for identical timestamps, higher sorts first in the descending
# stream. A payment event ranks below the status changes it triggers.
_SOURCE_RANK = {
    "payment_attempt": 0,
    "payment_verification": 1,
    "status_change": 2,
    "comment": 3,
}


def as_utc(ts: datetime) -> datetime:
    """Treat naive datetimes (SQLite) as UTC so streams compare cleanly."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def _sort_key(event: HistoryEvent, source_id: int) -> tuple:
    return (as_utc(event.timestamp), _SOURCE_RANK[event.event_type], source_id)


async def list_comments(session: AsyncSession, application_id: int) -> list[ApplicationComment]:
    result = await session.execute(
        select(ApplicationComment)
        .where(ApplicationComment.application_id == application_id)
        .order_by(ApplicationComment.created_at.asc(), ApplicationComment.id.asc())
    )
    return list(result.scalars().all())


async def get_application_history(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> list[HistoryEvent]:
    """Return the merged stream sorted by timestamp descending.

    The sort is total: ties on timestamp fall back to source rank and
    then row id, so repeated reads return the same order.
    """
    app = await require_application(session, user, application_id)
    is_applicant = user.role == UserRole.APPLICANT
    keyed: list[tuple[tuple, HistoryEvent]] = []

    for entry in await get_status_history(session, app.id):
        event = HistoryEvent(
            event_type="status_change",
            timestamp=as_utc(entry.changed_at),
            actor_id=entry.changed_by,
            status=entry.status.value,
            reason=entry.reason,
            details={
                "previous_status": entry.previous_status.value if entry.previous_status else None,
                "actor_role": entry.changed_by_role,
            },
        )
        keyed.append((_sort_key(event, entry.id), event))

    for attempt in await list_attempts(session, app.id):
        event = HistoryEvent(
            event_type="payment_attempt",
            timestamp=as_utc(attempt.attempted_at),
            actor_id=attempt.recorded_by,
            status=attempt.status.value,
            details={
                "reference_id": attempt.reference_id,
                "amount": str(attempt.amount),
                "error_message": attempt.error_message,
            },
        )
        keyed.append((_sort_key(event, attempt.id), event))

    for verification in await list_verifications(session, app.id):
        event = HistoryEvent(
            event_type="payment_verification",
            timestamp=as_utc(verification.verified_at),
            actor_id=verification.verified_by,
            status="verified",
            details={
                "reference_id": verification.reference_id,
                "amount": str(verification.amount),
                "payment_method": verification.payment_method.value,
                "received_at": as_utc(verification.received_at).isoformat(),
                "internal_note": None if is_applicant else verification.internal_note,
            },
        )
        keyed.append((_sort_key(event, verification.id), event))

    if not is_applicant:
        for comment in await list_comments(session, app.id):
            event = HistoryEvent(
                event_type="comment",
                timestamp=as_utc(comment.created_at),
                actor_id=comment.author_id,
                details={
                    "comment_id": comment.id,
                    "body": comment.body,
                    "is_internal": comment.is_internal,
                    "author_role": comment.author_role,
                },
            )
            keyed.append((_sort_key(event, comment.id), event))

    keyed.sort(key=lambda pair: pair[0], reverse=True)
    return [event for _, event in keyed]


async def add_comment(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    body: str,
    *,
    is_internal: bool = True,
) -> ApplicationComment:
    """Append a reviewer comment. Comments are never shown to applicants."""
    app = await require_application(session, user, application_id)
    if user.role not in UserRole.reviewer_roles():
        raise UnauthorizedError("Only reviewers can comment on applications.")

    comment = ApplicationComment(
        application_id=app.id,
        author_id=user.user_id,
        author_role=user.role.value,
        body=body,
        is_internal=is_internal,
    )
    session.add(comment)
    await session.flush()
    await write_audit_event(
        session,
        event_type="comment_added",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={"comment_id": comment.id, "is_internal": is_internal},
    )
    await session.commit()
    logger.info("Comment %s added to application %s by %s", comment.id, app.id, user.user_id)
    return comment
