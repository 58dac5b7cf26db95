# This project was developed with assistance from AI tools.
"""Application status aggregation service.

Combines the lifecycle status, payment state, outstanding conditional
requirements, and lease progress into a single summary for the applicant
or reviewer.
"""

import logging

from db.enums import ApplicationStatus, LeaseSignatureStatus
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.status import (
    ApplicationStatusResponse,
    PendingAction,
    StatusInfo,
)
from .application import require_application
from .ledger import is_paid
from .requirements import count_outstanding_required
from .transitions import allowed_targets_for_role

logger = logging.getLogger(__name__)

S = ApplicationStatus

# Human-readable descriptions for each application status.
STATUS_INFO: dict[ApplicationStatus, StatusInfo] = {
    S.DRAFT: StatusInfo(
        label="Draft",
        description="Your application has been started but not yet submitted.",
        next_step="Complete the form and continue to payment.",
    ),
    S.PENDING_PAYMENT: StatusInfo(
        label="Pending Payment",
        description="Your application is waiting for the application fee.",
        next_step="Pay the application fee so the landlord can review your application.",
    ),
    S.PAYMENT_VERIFIED: StatusInfo(
        label="Payment Verified",
        description="Your application fee has been received.",
        next_step="Submit your application for review.",
    ),
    S.SUBMITTED: StatusInfo(
        label="Submitted",
        description="Your application has been submitted to the landlord.",
        next_step="A reviewer will pick up your application shortly.",
    ),
    S.UNDER_REVIEW: StatusInfo(
        label="Under Review",
        description="A reviewer is evaluating your application.",
        next_step="You may be asked for more information before a decision.",
    ),
    S.INFO_REQUESTED: StatusInfo(
        label="Information Requested",
        description="The reviewer needs more information from you.",
        next_step="Provide the requested information and return the application to review.",
    ),
    S.CONDITIONAL_APPROVAL: StatusInfo(
        label="Conditionally Approved",
        description="Your application is approved once the listed conditions are met.",
        next_step="Satisfy the outstanding requirements.",
    ),
    S.APPROVED: StatusInfo(
        label="Approved",
        description="Your application has been approved.",
        next_step="Review and sign the lease.",
    ),
    S.REJECTED: StatusInfo(
        label="Rejected",
        description="Your application was not approved.",
        next_step="No further action required.",
    ),
    S.WITHDRAWN: StatusInfo(
        label="Withdrawn",
        description="This application has been withdrawn.",
        next_step="No further action required. You may apply to another listing at any time.",
    ),
    S.EXPIRED: StatusInfo(
        label="Expired",
        description="This application expired before it was completed.",
        next_step="Start a new application to continue.",
    ),
}

_TERMINAL_STATUSES = ApplicationStatus.terminal_statuses()


def _pending_actions(
    status: ApplicationStatus,
    paid: bool,
    outstanding: int,
    lease_status: LeaseSignatureStatus | None,
) -> list[PendingAction]:
    actions: list[PendingAction] = []
    if status == S.PENDING_PAYMENT and not paid:
        actions.append(PendingAction(action_type="pay_fee", description="Pay the application fee"))
    elif status == S.PAYMENT_VERIFIED:
        actions.append(PendingAction(action_type="submit", description="Submit the application for review"))
    elif status == S.INFO_REQUESTED:
        actions.append(PendingAction(action_type="provide_info", description="Provide the requested information"))
    elif status == S.CONDITIONAL_APPROVAL and outstanding > 0:
        actions.append(
            PendingAction(
                action_type="satisfy_requirements",
                description=f"{outstanding} required condition(s) to satisfy",
            )
        )
    elif status == S.APPROVED and lease_status != LeaseSignatureStatus.SIGNED:
        actions.append(PendingAction(action_type="sign_lease", description="Sign the lease"))
    return actions


async def get_application_status(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> ApplicationStatusResponse:
    """Build an aggregated status summary for an application.

    ``allowed_next_statuses`` is what the caller's role could request from
    the current status; preconditions are not evaluated.
    """
    app = await require_application(session, user, application_id)
    paid = await is_paid(session, app.id)
    outstanding = 0
    if app.status not in _TERMINAL_STATUSES:
        outstanding = await count_outstanding_required(session, app.id)

    allowed = [t.value for t in allowed_targets_for_role(app.status, user.role)]

    return ApplicationStatusResponse(
        application_id=app.id,
        status=app.status.value,
        status_info=STATUS_INFO[app.status],
        allowed_next_statuses=allowed,
        payment_status=app.payment_status,
        is_paid=paid,
        outstanding_requirement_count=outstanding,
        lease_signature_status=app.lease_signature_status,
        pending_actions=_pending_actions(app.status, paid, outstanding, app.lease_signature_status),
    )
