# This project was developed with assistance from AI tools.
"""Scoring input snapshot and breakdown schemas."""

from datetime import datetime
from decimal import Decimal

from db.enums import CreditTier, EmploymentStatus
from pydantic import BaseModel, ConfigDict, Field


class DocumentFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    uploaded: bool = False
    verified: bool = False


class ApplicationSnapshot(BaseModel):
    """Everything the scoring engine reads, frozen at call time."""

    model_config = ConfigDict(frozen=True)

    monthly_income: Decimal | None = None
    co_applicant_incomes: tuple[Decimal, ...] = ()
    monthly_rent: Decimal | None = None
    credit_tier: CreditTier | None = None
    years_renting: float | None = None
    has_eviction: bool = False
    has_landlord_reference: bool = False
    employment_status: EmploymentStatus | None = None
    years_employed: float | None = None
    documents: dict[str, DocumentFlags] = Field(default_factory=dict)


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    income_score: int
    credit_score: int
    rental_history_score: int
    employment_score: int
    documents_score: int
    total_score: int
    max_score: int
    flags: list[str]


class ScoreResponse(BaseModel):
    application_id: int
    breakdown: ScoreBreakdown
    scored_at: datetime
    scored_by: str
