# This project was developed with assistance from AI tools.
"""Append-only audit trail with a SHA-256 hash chain.

Each application has its own chain: an event stores the hash of the
previous event for the same application, so editing or deleting a stored
row breaks the link from its successor. Events without an application
form one more chain. Appends to a chain are serialized with a
transaction-scoped advisory lock keyed by the application id on
PostgreSQL, so writes for different applications never wait on each
other. Other backends rely on the enclosing transaction.
"""

import hashlib
import json
import logging
from datetime import UTC, datetime

from db import AuditEvent
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

GENESIS = "genesis"

# First half of the two-part advisory lock key; the second is the application id.
AUDIT_LOCK_NAMESPACE = 900_001


def _utc_naive_iso(ts: datetime | None) -> str:
    # SQLite hands back naive datetimes; hash the same string either way.
    if ts is None:
        return ""
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC).replace(tzinfo=None)
    return ts.isoformat()


def chain_hash(event: AuditEvent) -> str:
    """Digest of the fields an event's successor commits to."""
    material = "|".join(
        (
            str(event.id),
            event.event_type,
            str(event.application_id or ""),
            _utc_naive_iso(event.timestamp),
            json.dumps(event.event_data, sort_keys=True, default=str),
        )
    )
    return hashlib.sha256(material.encode()).hexdigest()


def _in_chain(application_id: int | None):
    if application_id is None:
        return AuditEvent.application_id.is_(None)
    return AuditEvent.application_id == application_id


async def _lock_chain(session: AsyncSession, application_id: int | None) -> None:
    bind = session.bind
    if bind is not None and bind.dialect.name == "postgresql":
        await session.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :chain)"),
            {"namespace": AUDIT_LOCK_NAMESPACE, "chain": application_id or 0},
        )


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    user_role: str | None = None,
    application_id: int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Append one event linked to the head of its application's chain.

    Flushes without committing; the caller commits the event together
    with the state change it records.
    """
    await _lock_chain(session, application_id)
    head = (
        await session.execute(
            select(AuditEvent).where(_in_chain(application_id)).order_by(AuditEvent.id.desc()).limit(1)
        )
    ).scalar_one_or_none()

    event = AuditEvent(
        event_type=event_type,
        user_id=user_id,
        user_role=user_role,
        application_id=application_id,
        event_data=event_data,
        prev_hash=chain_hash(head) if head is not None else GENESIS,
    )
    session.add(event)
    await session.flush()
    logger.debug("Audit %s for application %s (id=%s)", event_type, application_id, event.id)
    return event


async def verify_audit_chain(session: AsyncSession, application_id: int | None) -> dict:
    """Walk one application's chain oldest first and report the first broken link.

    Returns ``{"status": "OK", "events_checked": n}`` or
    ``{"status": "TAMPERED", "first_break_id": id, "events_checked": n}``
    where ``n`` counts events up to and including the break.
    """
    result = await session.execute(
        select(AuditEvent).where(_in_chain(application_id)).order_by(AuditEvent.id.asc())
    )
    expected = GENESIS
    checked = 0
    for event in result.scalars():
        checked += 1
        if event.prev_hash != expected:
            logger.warning("Audit chain for application %s broken at event %s", application_id, event.id)
            return {"status": "TAMPERED", "first_break_id": event.id, "events_checked": checked}
        expected = chain_hash(event)
    return {"status": "OK", "events_checked": checked}


async def get_audit_chain_length(session: AsyncSession, application_id: int | None) -> int:
    stmt = select(func.count(AuditEvent.id)).where(_in_chain(application_id))
    return (await session.execute(stmt)).scalar_one()


async def get_events_by_application(
    session: AsyncSession,
    application_id: int,
    *,
    event_type: str | None = None,
) -> list[AuditEvent]:
    """Events for one application in write order, optionally of one type."""
    stmt = select(AuditEvent).where(AuditEvent.application_id == application_id)
    if event_type is not None:
        stmt = stmt.where(AuditEvent.event_type == event_type)
    result = await session.execute(stmt.order_by(AuditEvent.id.asc()))
    return list(result.scalars().all())
