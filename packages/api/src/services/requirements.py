# This project was developed with assistance from AI tools.
"""Conditional requirement tracker.

Requirements are seeded as a batch when an application enters
conditional approval, and afterwards only individual items change
(unsatisfied -> satisfied). Nothing here deletes a requirement.
"""

import logging
from datetime import UTC, datetime

from db import Application, ConditionalRequirement
from db.enums import UserRole
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import UnauthorizedError, ValidationFailedError
from ..schemas.auth import UserContext
from ..schemas.requirement import RequirementInput
from .application import commit_or_conflict, flush_or_conflict, require_application
from .audit import write_audit_event

logger = logging.getLogger(__name__)


async def list_requirements(session: AsyncSession, application_id: int) -> list[ConditionalRequirement]:
    """Requirements in the order they were supplied."""
    result = await session.execute(
        select(ConditionalRequirement)
        .where(ConditionalRequirement.application_id == application_id)
        .order_by(ConditionalRequirement.position.asc(), ConditionalRequirement.id.asc())
    )
    return list(result.scalars().all())


async def all_required_satisfied(session: AsyncSession, application_id: int) -> bool:
    """True when no ``required`` requirement is still unsatisfied.

    Optional requirements never block. An application with no
    requirements trivially satisfies the predicate.
    """
    return await count_outstanding_required(session, application_id) == 0


async def count_outstanding_required(session: AsyncSession, application_id: int) -> int:
    result = await session.execute(
        select(func.count(ConditionalRequirement.id)).where(
            ConditionalRequirement.application_id == application_id,
            ConditionalRequirement.required.is_(True),
            ConditionalRequirement.satisfied.is_(False),
        )
    )
    return result.scalar() or 0


async def seed_requirements(
    session: AsyncSession,
    application: Application,
    requirements: list[RequirementInput],
    actor: UserContext,
    *,
    due_date: datetime | None = None,
) -> list[ConditionalRequirement]:
    """Append a batch of unsatisfied requirements. Does not commit.

    Only the conditional-approval transition calls this. Positions
    continue after any requirements from an earlier round.
    """
    if not requirements:
        raise ValidationFailedError("At least one requirement is needed for conditional approval.")
    for item in requirements:
        if not item.description or not item.description.strip():
            raise ValidationFailedError("Every requirement needs a description.")

    existing = await list_requirements(session, application.id)
    start = len(existing)
    rows = [
        ConditionalRequirement(
            application_id=application.id,
            position=start + i,
            requirement_type=item.type,
            description=item.description.strip(),
            required=item.required,
            satisfied=False,
            due_date=due_date,
            created_by=actor.user_id,
        )
        for i, item in enumerate(requirements)
    ]
    session.add_all(rows)
    await session.flush()

    await write_audit_event(
        session,
        event_type="requirements_seeded",
        user_id=actor.user_id,
        user_role=actor.role.value,
        application_id=application.id,
        event_data={
            "requirement_ids": [r.id for r in rows],
            "count": len(rows),
            "due_date": due_date.isoformat() if due_date else None,
        },
    )
    return rows


async def mark_requirement_satisfied(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    requirement_id: int,
    *,
    notes: str | None = None,
) -> ConditionalRequirement | None:
    """Mark one requirement satisfied (reviewer roles only).

    Returns None if the requirement does not belong to the application.
    Marking an already-satisfied requirement is a no-op: the original
    satisfied_at/satisfied_by are kept and no audit event is written.
    """
    app = await require_application(session, user, application_id)
    if user.role not in UserRole.reviewer_roles():
        raise UnauthorizedError("Only reviewers can mark requirements satisfied.")

    result = await session.execute(
        select(ConditionalRequirement).where(
            ConditionalRequirement.id == requirement_id,
            ConditionalRequirement.application_id == application_id,
        )
    )
    requirement = result.scalar_one_or_none()
    if requirement is None:
        return None
    if requirement.satisfied:
        return requirement

    now = datetime.now(UTC)
    requirement.satisfied = True
    requirement.satisfied_at = now
    requirement.satisfied_by = user.user_id
    if notes:
        requirement.notes = notes
    # Touch the aggregate so concurrent writers see a version change.
    app.updated_at = now
    await flush_or_conflict(session, application_id)

    await write_audit_event(
        session,
        event_type="requirement_satisfied",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=application_id,
        event_data={"requirement_id": requirement_id, "description": requirement.description},
    )
    await commit_or_conflict(session, application_id)
    logger.info("Requirement %s on application %s satisfied by %s", requirement_id, application_id, user.user_id)
    return requirement
