# This project was developed with assistance from AI tools.
"""Application service with role-based data scope filtering.

Every query is filtered through the caller's DataScope so that applicants
see only their own applications, landlords and property managers see
applications on listings they own, agents see their assigned listings,
and admin/system see all.
"""

import logging
from datetime import UTC, datetime

from db import Application, StatusHistoryEntry
from db.enums import ApplicationStatus, PaymentStatus, UserRole
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from ..core.errors import (
    ApplicationNotFoundError,
    ConflictError,
    UnauthorizedError,
    ValidationFailedError,
)
from ..schemas.application import ApplicationAutosave, ApplicationCreate
from ..schemas.auth import UserContext
from .audit import write_audit_event
from .listings import get_listing_terms
from .scope import apply_data_scope

logger = logging.getLogger(__name__)

_FORM_DICT_FIELDS = ("personal_info", "employment", "rental_history", "document_status")

# Sections (and fields within them) that must be filled before payment.
_REQUIRED_FORM_FIELDS = {
    "personal_info": ("full_name", "email", "phone"),
    "employment": ("monthly_income",),
    "rental_history": (),
}

# Applicants may edit while drafting or while answering an info request.
EDITABLE_STATUSES = frozenset({ApplicationStatus.DRAFT, ApplicationStatus.INFO_REQUESTED})

_SORT_COLUMNS = {
    "updated_at": Application.updated_at.desc(),
    "created_at": Application.created_at.desc(),
    "score": Application.score.desc().nulls_last(),
}


async def list_applications(
    session: AsyncSession,
    user: UserContext,
    *,
    offset: int = 0,
    limit: int = 20,
    filter_status: ApplicationStatus | None = None,
    sort_by: str | None = None,
) -> tuple[list[Application], int]:
    """Return applications visible to the current user, plus the total count."""
    count_stmt = select(func.count(Application.id)).select_from(Application)
    count_stmt = apply_data_scope(count_stmt, user.data_scope, user)
    if filter_status is not None:
        count_stmt = count_stmt.where(Application.status == filter_status)
    total = (await session.execute(count_stmt)).scalar() or 0

    order = _SORT_COLUMNS.get(sort_by, Application.updated_at.desc())
    stmt = select(Application).order_by(order, Application.id.desc()).offset(offset).limit(limit)
    stmt = apply_data_scope(stmt, user.data_scope, user)
    if filter_status is not None:
        stmt = stmt.where(Application.status == filter_status)
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def get_application(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> Application | None:
    """Return a single application if visible to the current user.

    Returns None (which the route maps to 404) for out-of-scope applications
    rather than 403, to avoid leaking existence of resources.
    """
    stmt = select(Application).where(Application.id == application_id)
    stmt = apply_data_scope(stmt, user.data_scope, user)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def require_application(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> Application:
    """Like get_application, but raises ApplicationNotFoundError."""
    app = await get_application(session, user, application_id)
    if app is None:
        raise ApplicationNotFoundError(application_id)
    return app


async def create_application(
    session: AsyncSession,
    user: UserContext,
    data: ApplicationCreate,
) -> Application:
    """Start a draft application for the current applicant.

    Listing terms (rent, fee, state code) are captured on the application
    so later listing edits do not change an in-flight application.
    """
    if user.role != UserRole.APPLICANT:
        raise UnauthorizedError("Only applicants can start an application.")

    terms = await get_listing_terms(session, data.listing_id)
    if terms is None:
        raise ValidationFailedError(f"Listing {data.listing_id} does not exist.")

    existing = await session.execute(
        select(Application.id).where(
            Application.applicant_user_id == user.user_id,
            Application.listing_id == data.listing_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationFailedError("You have already applied to this listing.")

    form = data.model_dump(mode="json", exclude_none=True, exclude={"listing_id"})
    application = Application(
        applicant_user_id=user.user_id,
        listing_id=data.listing_id,
        status=ApplicationStatus.DRAFT,
        payment_status=PaymentStatus.UNPAID,
        monthly_rent=terms.monthly_rent,
        application_fee=terms.application_fee,
        state_code=terms.state_code,
        **form,
    )
    session.add(application)
    await session.flush()

    session.add(
        StatusHistoryEntry(
            application_id=application.id,
            status=ApplicationStatus.DRAFT,
            changed_by=user.user_id,
            changed_by_role=user.role.value,
            reason="Application created",
        )
    )
    await write_audit_event(
        session,
        event_type="application_created",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=application.id,
        event_data={"listing_id": data.listing_id},
    )
    await session.commit()
    logger.info("Application %s created by %s for listing %s", application.id, user.user_id, data.listing_id)
    return application


async def autosave_application(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    data: ApplicationAutosave,
) -> Application:
    """Merge partial form sections into the application. Never changes status.

    Allowed in draft and in info_requested. A stored score is a snapshot
    and is left as it was.
    """
    app = await require_application(session, user, application_id)
    if app.applicant_user_id != user.user_id:
        raise UnauthorizedError("Only the applicant can edit this application.")
    if app.status not in EDITABLE_STATUSES:
        raise ValidationFailedError(
            f"Application cannot be edited in status '{app.status.value}'."
        )

    patch = data.model_dump(mode="json", exclude_unset=True)
    for field, value in patch.items():
        if value is None:
            continue
        if field in _FORM_DICT_FIELDS:
            # Assign a new dict so the JSON column registers the change.
            setattr(app, field, {**(getattr(app, field) or {}), **value})
        else:
            setattr(app, field, value)

    await commit_or_conflict(session, app.id)
    return app


async def get_status_history(session: AsyncSession, application_id: int) -> list[StatusHistoryEntry]:
    """Status history in canonical (changed_at, id) order."""
    result = await session.execute(
        select(StatusHistoryEntry)
        .where(StatusHistoryEntry.application_id == application_id)
        .order_by(StatusHistoryEntry.changed_at.asc(), StatusHistoryEntry.id.asc())
    )
    return list(result.scalars().all())


async def verify_document(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    document_name: str,
) -> Application:
    """Reviewer marks an uploaded document as verified.

    The file itself lives in external storage; only the flag changes here.
    """
    app = await require_application(session, user, application_id)
    if user.role not in UserRole.reviewer_roles():
        raise UnauthorizedError("Only reviewers can verify documents.")

    documents = dict(app.document_status or {})
    current = documents.get(document_name) or {}
    if not current.get("uploaded"):
        raise ValidationFailedError(f"Document '{document_name}' has not been uploaded.")
    documents[document_name] = {**current, "verified": True}
    app.document_status = documents
    app.updated_at = datetime.now(UTC)
    await flush_or_conflict(session, app.id)

    await write_audit_event(
        session,
        event_type="document_verified",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={"document": document_name},
    )
    await commit_or_conflict(session, app.id)
    return app


async def flush_or_conflict(session: AsyncSession, application_id: int) -> None:
    """Flush pending changes; a stale application version becomes ConflictError."""
    try:
        await session.flush()
    except StaleDataError as exc:
        await session.rollback()
        logger.warning("Stale write rejected for application %s", application_id)
        raise ConflictError(
            f"Application {application_id} was modified concurrently; re-read and retry."
        ) from exc


async def commit_or_conflict(session: AsyncSession, application_id: int) -> None:
    """Commit; a stale application version becomes ConflictError."""
    try:
        await session.commit()
    except StaleDataError as exc:
        await session.rollback()
        logger.warning("Stale commit rejected for application %s", application_id)
        raise ConflictError(
            f"Application {application_id} was modified concurrently; re-read and retry."
        ) from exc


def missing_form_fields(app: Application) -> list[str]:
    """Names of required form sections or fields that are still empty."""
    missing = []
    for section, fields in _REQUIRED_FORM_FIELDS.items():
        data = getattr(app, section)
        if not data:
            missing.append(section)
            continue
        missing.extend(f"{section}.{name}" for name in fields if data.get(name) in (None, ""))
    return missing
