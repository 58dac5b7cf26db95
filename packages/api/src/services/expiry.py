# This project was developed with assistance from AI tools.
"""Expiry sweep.

Moves every non-terminal application whose ``expires_at`` has passed to
``expired`` as the system actor. Meant to be called by an external
scheduler; each application is committed on its own so one conflict does
not hold up the rest of the batch.
"""

import logging
from datetime import UTC, datetime

from db import Application
from db.enums import ApplicationStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import system_user
from ..core.errors import LifecycleError
from .application import commit_or_conflict
from .lifecycle import apply_transition
from .notifications import notify_status_changed

logger = logging.getLogger(__name__)

EXPIRY_REASON = "Application expired"


async def expire_stale_applications(session: AsyncSession, now: datetime | None = None) -> list[int]:
    """Expire overdue applications and return the ids that were expired."""
    now = now or datetime.now(UTC)
    result = await session.execute(
        select(Application.id)
        .where(
            Application.expires_at.is_not(None),
            Application.expires_at < now,
            Application.status.notin_(list(ApplicationStatus.terminal_statuses())),
        )
        .order_by(Application.id.asc())
    )
    candidate_ids = list(result.scalars().all())

    system = system_user()
    expired: list[int] = []
    for app_id in candidate_ids:
        # Reload each row; a rollback on an earlier conflict expires the session.
        app = await session.get(Application, app_id, populate_existing=True)
        if app is None or app.status in ApplicationStatus.terminal_statuses():
            continue
        source = app.status
        try:
            await apply_transition(session, app, ApplicationStatus.EXPIRED, system, reason=EXPIRY_REASON, now=now)
            await commit_or_conflict(session, app_id)
        except LifecycleError as exc:
            logger.warning("Could not expire application %s: %s", app_id, exc.message)
            continue
        expired.append(app_id)
        await notify_status_changed(app_id, source, ApplicationStatus.EXPIRED, system.user_id, EXPIRY_REASON)

    if expired:
        logger.info("Expired %d application(s): %s", len(expired), expired)
    return expired
