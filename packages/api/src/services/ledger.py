# This project was developed with assistance from AI tools.
"""Payment ledger queries.

Read side of the two append-only collections. Kept free of lifecycle
imports so the transition engine can use ``is_paid`` as a precondition.
"""

from db import PaymentAttempt, PaymentVerification
from db.enums import PaymentAttemptStatus
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def list_attempts(session: AsyncSession, application_id: int) -> list[PaymentAttempt]:
    result = await session.execute(
        select(PaymentAttempt)
        .where(PaymentAttempt.application_id == application_id)
        .order_by(PaymentAttempt.attempted_at.asc(), PaymentAttempt.id.asc())
    )
    return list(result.scalars().all())


async def list_verifications(session: AsyncSession, application_id: int) -> list[PaymentVerification]:
    result = await session.execute(
        select(PaymentVerification)
        .where(PaymentVerification.application_id == application_id)
        .order_by(PaymentVerification.verified_at.asc(), PaymentVerification.id.asc())
    )
    return list(result.scalars().all())


async def is_paid(session: AsyncSession, application_id: int) -> bool:
    """True if any attempt succeeded or any manual verification exists."""
    success = await session.execute(
        select(func.count(PaymentAttempt.id)).where(
            PaymentAttempt.application_id == application_id,
            PaymentAttempt.status == PaymentAttemptStatus.SUCCESS,
        )
    )
    if (success.scalar() or 0) > 0:
        return True
    verified = await session.execute(
        select(func.count(PaymentVerification.id)).where(
            PaymentVerification.application_id == application_id
        )
    )
    return (verified.scalar() or 0) > 0


async def reference_exists(session: AsyncSession, application_id: int, reference_id: str) -> bool:
    """True if ``reference_id`` is already used by either collection."""
    for model in (PaymentAttempt, PaymentVerification):
        result = await session.execute(
            select(func.count(model.id)).where(
                model.application_id == application_id,
                model.reference_id == reference_id,
            )
        )
        if (result.scalar() or 0) > 0:
            return True
    return False
