# This project was developed with assistance from AI tools.
"""Lifecycle error taxonomy.

Every error carries a machine-readable ``kind`` and a human-readable
message. The HTTP layer maps ``kind`` to a status code; service callers
can branch on the exception class directly.
"""


class LifecycleError(Exception):
    """Base class for caller-surfaced lifecycle failures."""

    kind = "lifecycle_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApplicationNotFoundError(LifecycleError):
    """Application does not exist or is outside the caller's data scope."""

    kind = "not_found"
    status_code = 404

    def __init__(self, application_id: int):
        super().__init__(f"Application {application_id} not found")
        self.application_id = application_id


class InvalidTransitionError(LifecycleError):
    """Requested edge is not in the transition table, or is out of order."""

    kind = "invalid_transition"
    status_code = 409


class UnauthorizedError(LifecycleError):
    """Actor's role is not permitted for this edge or signing step."""

    kind = "unauthorized"
    status_code = 403


class PreconditionNotMetError(LifecycleError):
    """Payment unverified or a required requirement is unsatisfied."""

    kind = "precondition_not_met"
    status_code = 409


class DuplicateReferenceError(LifecycleError):
    kind = "duplicate_reference"
    status_code = 409


class AlreadyVerifiedError(LifecycleError):
    kind = "already_verified"
    status_code = 409


class AlreadySignedError(LifecycleError):
    kind = "already_signed"
    status_code = 409


class ValidationFailedError(LifecycleError):
    """Missing or malformed input on a lifecycle operation."""

    kind = "validation_error"
    status_code = 422


class ConflictError(LifecycleError):
    """Stale read: the application changed since the caller read it."""

    kind = "conflict"
    status_code = 409
