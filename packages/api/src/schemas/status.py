# This project was developed with assistance from AI tools.
"""Application status response schemas."""

from db.enums import LeaseSignatureStatus, PaymentStatus
from pydantic import BaseModel


class PendingAction(BaseModel):
    """A single action the applicant or reviewer needs to take."""

    action_type: str
    description: str


class StatusInfo(BaseModel):
    """Human-readable info about the current application status."""

    label: str
    description: str
    next_step: str


class ApplicationStatusResponse(BaseModel):
    """Aggregated status summary for an application."""

    application_id: int
    status: str
    status_info: StatusInfo
    allowed_next_statuses: list[str]
    payment_status: PaymentStatus
    is_paid: bool
    outstanding_requirement_count: int
    lease_signature_status: LeaseSignatureStatus | None = None
    pending_actions: list[PendingAction]
