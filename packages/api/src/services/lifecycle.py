# This project was developed with assistance from AI tools.
"""Status transition engine.

Validates and applies status changes against the declarative table in
``services/transitions.py``. Checks run in a fixed order:

1. edge membership (InvalidTransitionError)
2. actor role (UnauthorizedError)
3. payload (ValidationFailedError)
4. preconditions (PreconditionNotMetError)
5. optimistic version (ConflictError)

The status write, its history entry, any seeded requirements, and the
audit event are committed together. Notification happens after commit.
"""

import logging
from datetime import UTC, datetime, timedelta

from db import Application, StatusHistoryEntry
from db.enums import ApplicationStatus, LeaseSignatureStatus, RejectionCategory
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import ConflictError, PreconditionNotMetError, ValidationFailedError
from ..schemas.auth import UserContext
from ..schemas.requirement import RequirementInput
from .application import commit_or_conflict, flush_or_conflict, missing_form_fields, require_application
from .audit import write_audit_event
from .ledger import is_paid
from .notifications import notify_status_changed
from .requirements import all_required_satisfied, seed_requirements
from .transitions import Precondition, TransitionRule, authorize_transition

logger = logging.getLogger(__name__)

_REASON_REQUIRED = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.INFO_REQUESTED})
_REVIEW_OUTCOMES = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})


def _validate_payload(
    target: ApplicationStatus,
    reason: str | None,
    requirements: list[RequirementInput] | None,
    rejection_category: RejectionCategory | None,
) -> None:
    """Reject a malformed request before anything is written."""
    if target in _REASON_REQUIRED and not (reason and reason.strip()):
        raise ValidationFailedError(f"A reason is required to move an application to '{target.value}'.")
    if target == ApplicationStatus.REJECTED and rejection_category is None:
        raise ValidationFailedError("A rejection category is required to reject an application.")
    if target == ApplicationStatus.CONDITIONAL_APPROVAL:
        if not requirements:
            raise ValidationFailedError("At least one requirement is needed for conditional approval.")
        for position, item in enumerate(requirements, start=1):
            if not (item.description and item.description.strip()):
                raise ValidationFailedError(f"Requirement {position} needs a description.")


async def _check_preconditions(session: AsyncSession, app: Application, rule: TransitionRule) -> None:
    for precondition in rule.preconditions:
        if precondition == Precondition.FORM_COMPLETE:
            missing = missing_form_fields(app)
            if missing:
                raise PreconditionNotMetError(
                    f"Application form is incomplete; missing: {', '.join(missing)}."
                )
        elif precondition == Precondition.PAYMENT_VERIFIED:
            if not await is_paid(session, app.id):
                raise PreconditionNotMetError(
                    "Application fee has not been paid or verified."
                )
        elif precondition == Precondition.REQUIRED_REQUIREMENTS_SATISFIED:
            if not await all_required_satisfied(session, app.id):
                raise PreconditionNotMetError(
                    "All required conditional requirements must be satisfied before approval."
                )


async def apply_transition(
    session: AsyncSession,
    app: Application,
    target: ApplicationStatus,
    actor: UserContext,
    *,
    reason: str | None = None,
    requirements: list[RequirementInput] | None = None,
    due_date: datetime | None = None,
    rejection_category: RejectionCategory | None = None,
    appealable: bool = False,
    expected_version: int | None = None,
    now: datetime | None = None,
) -> StatusHistoryEntry:
    """Validate and stage one transition on an already-loaded application.

    Flushes but does not commit, so callers can chain transitions (payment
    verification followed by automatic submission) in one transaction.
    """
    source = app.status
    rule = authorize_transition(source, target, actor.role)
    _validate_payload(target, reason, requirements, rejection_category)
    await _check_preconditions(session, app, rule)
    if expected_version is not None and expected_version != app.version:
        raise ConflictError(
            f"Application {app.id} is at version {app.version}, not {expected_version}; re-read and retry."
        )

    now = now or datetime.now(UTC)
    app.previous_status = source
    app.status = target

    if target == ApplicationStatus.PENDING_PAYMENT and app.expires_at is None:
        app.expires_at = now + timedelta(days=settings.APPLICATION_EXPIRATION_DAYS)
    elif target == ApplicationStatus.SUBMITTED:
        app.submitted_at = now
    elif target == ApplicationStatus.CONDITIONAL_APPROVAL:
        app.conditional_due_date = due_date

    if target in _REVIEW_OUTCOMES:
        app.reviewed_by = actor.user_id
        app.reviewed_at = now
    if target == ApplicationStatus.APPROVED:
        app.lease_signature_status = LeaseSignatureStatus.UNSIGNED
    elif target == ApplicationStatus.REJECTED:
        app.rejection_category = rejection_category
        app.rejection_reason = reason.strip()
        app.rejection_appealable = appealable

    await flush_or_conflict(session, app.id)

    entry = StatusHistoryEntry(
        application_id=app.id,
        status=target,
        previous_status=source,
        changed_at=now,
        changed_by=actor.user_id,
        changed_by_role=actor.role.value,
        reason=reason,
    )
    session.add(entry)

    if target == ApplicationStatus.CONDITIONAL_APPROVAL:
        await seed_requirements(session, app, requirements, actor, due_date=due_date)

    event_data = {"from": source.value, "to": target.value, "reason": reason}
    if target == ApplicationStatus.REJECTED:
        event_data.update(rejection_category=rejection_category.value, appealable=appealable)
    await write_audit_event(
        session,
        event_type="status_change",
        user_id=actor.user_id,
        user_role=actor.role.value,
        application_id=app.id,
        event_data=event_data,
    )
    logger.info(
        "Application %s: %s -> %s by %s (%s)",
        app.id,
        source.value,
        target.value,
        actor.user_id,
        actor.role.value,
    )
    return entry


async def request_transition(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    target: ApplicationStatus,
    *,
    reason: str | None = None,
    requirements: list[RequirementInput] | None = None,
    due_date: datetime | None = None,
    rejection_category: RejectionCategory | None = None,
    appealable: bool = False,
    expected_version: int | None = None,
) -> tuple[Application, StatusHistoryEntry]:
    """Move an application to ``target`` on behalf of ``user``.

    Raises:
        ApplicationNotFoundError: Missing or out of the caller's scope.
        InvalidTransitionError: Edge is not in the transition table.
        UnauthorizedError: Role may not request this edge.
        ValidationFailedError: Missing reason, rejection category, or
            requirements payload.
        PreconditionNotMetError: Form, payment, or requirement predicate is false.
        ConflictError: Stale version.
    """
    app = await require_application(session, user, application_id)
    source = app.status
    entry = await apply_transition(
        session,
        app,
        target,
        user,
        reason=reason,
        requirements=requirements,
        due_date=due_date,
        rejection_category=rejection_category,
        appealable=appealable,
        expected_version=expected_version,
    )
    await commit_or_conflict(session, application_id)
    await notify_status_changed(application_id, source, target, user.user_id, reason)
    return app, entry
