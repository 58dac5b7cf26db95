# This project was developed with assistance from AI tools.
"""Declarative status transition table.

Pure data and pure functions -- no DB calls. Each allowed edge maps to
the roles that may request it and the precondition predicates that must
hold. The lifecycle service consults this table once per request.
"""

import enum
from dataclasses import dataclass

from db.enums import ApplicationStatus, UserRole

from ..core.errors import InvalidTransitionError, UnauthorizedError

S = ApplicationStatus


class Precondition(str, enum.Enum):
    """Named predicates evaluated against persisted state."""

    FORM_COMPLETE = "form_complete"
    PAYMENT_VERIFIED = "payment_verified"
    REQUIRED_REQUIREMENTS_SATISFIED = "required_requirements_satisfied"


@dataclass(frozen=True)
class TransitionRule:
    """One allowed (source -> target) edge."""

    source: ApplicationStatus
    target: ApplicationStatus
    roles: frozenset[UserRole]
    preconditions: tuple[Precondition, ...] = ()


REVIEWERS = UserRole.reviewer_roles()
APPLICANT_ONLY = frozenset({UserRole.APPLICANT})
SYSTEM_ONLY = frozenset({UserRole.SYSTEM})


def _rule(source, target, roles, *preconditions) -> TransitionRule:
    return TransitionRule(source=source, target=target, roles=frozenset(roles), preconditions=preconditions)


_EXPLICIT_RULES: tuple[TransitionRule, ...] = (
    _rule(S.DRAFT, S.PENDING_PAYMENT, APPLICANT_ONLY, Precondition.FORM_COMPLETE),
    _rule(S.DRAFT, S.WITHDRAWN, APPLICANT_ONLY),
    _rule(
        S.PENDING_PAYMENT,
        S.PAYMENT_VERIFIED,
        APPLICANT_ONLY | SYSTEM_ONLY | REVIEWERS,
        Precondition.PAYMENT_VERIFIED,
    ),
    _rule(S.PENDING_PAYMENT, S.WITHDRAWN, APPLICANT_ONLY),
    _rule(S.PAYMENT_VERIFIED, S.SUBMITTED, APPLICANT_ONLY | SYSTEM_ONLY),
    _rule(S.SUBMITTED, S.UNDER_REVIEW, REVIEWERS),
    _rule(S.SUBMITTED, S.APPROVED, REVIEWERS),
    _rule(S.SUBMITTED, S.REJECTED, REVIEWERS),
    _rule(S.SUBMITTED, S.WITHDRAWN, APPLICANT_ONLY),
    _rule(S.UNDER_REVIEW, S.INFO_REQUESTED, REVIEWERS),
    _rule(S.UNDER_REVIEW, S.CONDITIONAL_APPROVAL, REVIEWERS),
    _rule(S.UNDER_REVIEW, S.APPROVED, REVIEWERS),
    _rule(S.UNDER_REVIEW, S.REJECTED, REVIEWERS),
    _rule(S.INFO_REQUESTED, S.UNDER_REVIEW, APPLICANT_ONLY | REVIEWERS),
    _rule(S.INFO_REQUESTED, S.APPROVED, REVIEWERS),
    _rule(S.INFO_REQUESTED, S.REJECTED, REVIEWERS),
    _rule(S.INFO_REQUESTED, S.WITHDRAWN, APPLICANT_ONLY),
    _rule(
        S.CONDITIONAL_APPROVAL,
        S.APPROVED,
        REVIEWERS,
        Precondition.REQUIRED_REQUIREMENTS_SATISFIED,
    ),
    _rule(S.CONDITIONAL_APPROVAL, S.REJECTED, REVIEWERS),
    _rule(S.CONDITIONAL_APPROVAL, S.WITHDRAWN, APPLICANT_ONLY),
)


def _build_table() -> dict[tuple[ApplicationStatus, ApplicationStatus], TransitionRule]:
    table = {(r.source, r.target): r for r in _EXPLICIT_RULES}
    terminal = ApplicationStatus.terminal_statuses()
    for status in ApplicationStatus:
        if status not in terminal:
            table[(status, S.EXPIRED)] = _rule(status, S.EXPIRED, SYSTEM_ONLY)
    return table


TRANSITION_TABLE: dict[tuple[ApplicationStatus, ApplicationStatus], TransitionRule] = _build_table()


def get_rule(source: ApplicationStatus, target: ApplicationStatus) -> TransitionRule | None:
    """Return the rule for an edge, or None if the edge is not allowed."""
    return TRANSITION_TABLE.get((source, target))


def allowed_targets(source: ApplicationStatus) -> frozenset[ApplicationStatus]:
    """All targets reachable from ``source`` by any role."""
    return frozenset(t for (s, t) in TRANSITION_TABLE if s == source)


def allowed_targets_for_role(source: ApplicationStatus, role: UserRole) -> list[ApplicationStatus]:
    """Targets ``role`` may request from ``source``, in enum order.

    Preconditions are not evaluated here.
    """
    targets = []
    for target in ApplicationStatus:
        rule = TRANSITION_TABLE.get((source, target))
        if rule is not None and role in rule.roles:
            targets.append(target)
    return targets


def authorize_transition(
    source: ApplicationStatus,
    target: ApplicationStatus,
    role: UserRole,
) -> TransitionRule:
    """Check edge membership, then role permission.

    Raises:
        InvalidTransitionError: Edge is not in the table (for any role).
        UnauthorizedError: Edge exists but ``role`` may not request it.
    """
    rule = get_rule(source, target)
    if rule is None:
        allowed = sorted(t.value for t in allowed_targets(source))
        raise InvalidTransitionError(
            f"Cannot transition from '{source.value}' to '{target.value}'. "
            f"Allowed: {allowed if allowed else 'none (terminal status)'}."
        )
    if role not in rule.roles:
        raise UnauthorizedError(
            f"Role '{role.value}' may not move an application from "
            f"'{source.value}' to '{target.value}'."
        )
    return rule
