# This project was developed with assistance from AI tools.
"""Application request/response schemas."""

from datetime import datetime
from decimal import Decimal

from db.enums import (
    ApplicationStatus,
    CreditTier,
    EmploymentStatus,
    LeaseSignatureStatus,
    PaymentStatus,
    RejectionCategory,
)
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination
from .requirement import RequirementInput


class PersonalInfo(BaseModel):
    """Applicant identity section. ``credit_tier`` is self-reported."""

    model_config = ConfigDict(extra="allow")

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    date_of_birth: str | None = None
    credit_tier: CreditTier | None = None


class EmploymentInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: EmploymentStatus | None = None
    employer: str | None = None
    monthly_income: Decimal | None = Field(default=None, ge=0)
    years_employed: float | None = Field(default=None, ge=0)


class RentalHistoryInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    current_address: str | None = None
    years_renting: float | None = Field(default=None, ge=0)
    has_eviction: bool = False
    landlord_name: str | None = None
    landlord_phone: str | None = None


class CoApplicant(BaseModel):
    model_config = ConfigDict(extra="allow")

    full_name: str | None = None
    monthly_income: Decimal | None = Field(default=None, ge=0)


class DocumentState(BaseModel):
    """Opaque document reference plus upload/verification flags."""

    uploaded: bool = False
    verified: bool = False
    reference: str | None = None


class ApplicationForm(BaseModel):
    """Applicant-editable form sections."""

    personal_info: PersonalInfo | None = None
    employment: EmploymentInfo | None = None
    rental_history: RentalHistoryInfo | None = None
    co_applicants: list[CoApplicant] | None = None
    document_status: dict[str, DocumentState] | None = None


class ApplicationCreate(ApplicationForm):
    """Start a new rental application for a listing."""

    listing_id: int


class ApplicationAutosave(ApplicationForm):
    """Partial form save while the application is still a draft."""


class StatusHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: ApplicationStatus
    previous_status: ApplicationStatus | None = None
    changed_at: datetime
    changed_by: str
    changed_by_role: str | None = None
    reason: str | None = None


class ApplicationResponse(BaseModel):
    """Single application response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_user_id: str
    listing_id: int
    status: ApplicationStatus
    previous_status: ApplicationStatus | None = None
    version: int
    personal_info: dict | None = None
    employment: dict | None = None
    rental_history: dict | None = None
    co_applicants: list | None = None
    document_status: dict | None = None
    monthly_rent: Decimal | None = None
    application_fee: Decimal | None = None
    state_code: str | None = None
    score: int | None = None
    score_breakdown: dict | None = None
    scored_at: datetime | None = None
    payment_status: PaymentStatus
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_category: RejectionCategory | None = None
    rejection_reason: str | None = None
    rejection_appealable: bool | None = None
    conditional_due_date: datetime | None = None
    lease_signature_status: LeaseSignatureStatus | None = None
    lease_fully_signed_at: datetime | None = None
    submitted_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    """Paginated list of applications."""

    data: list[ApplicationResponse]
    pagination: Pagination


class TransitionRequest(BaseModel):
    """Request a status change.

    ``requirements`` and ``due_date`` are only read when the target is
    ``conditional_approval``; ``rejection_category`` and ``appealable``
    only when it is ``rejected``. ``expected_version`` enables the
    optimistic stale-read check.
    """

    target_status: ApplicationStatus
    reason: str | None = None
    rejection_category: RejectionCategory | None = None
    appealable: bool = False
    requirements: list[RequirementInput] | None = None
    due_date: datetime | None = None
    expected_version: int | None = None


class TransitionResponse(BaseModel):
    data: ApplicationResponse
    history_entry: StatusHistoryItem
