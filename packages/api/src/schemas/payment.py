# This project was developed with assistance from AI tools.
"""Payment ledger request/response schemas."""

from datetime import datetime
from decimal import Decimal

from db.enums import ApplicationStatus, PaymentAttemptStatus, PaymentMethod, PaymentStatus
from pydantic import BaseModel, ConfigDict, Field


class PaymentAttemptCreate(BaseModel):
    reference_id: str = Field(min_length=1, max_length=100)
    status: PaymentAttemptStatus
    amount: Decimal = Field(ge=0)
    error_message: str | None = None


class PaymentVerifyRequest(BaseModel):
    """Manual verification entered by a reviewer.

    Fields are optional at the schema level so the ledger can report every
    missing field as one validation error rather than a bare 422.
    """

    amount: Decimal | None = None
    payment_method: PaymentMethod | None = None
    received_at: datetime | None = None
    confirmed: bool = False
    reference_id: str | None = Field(default=None, max_length=100)
    internal_note: str | None = None


class PaymentAttemptItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reference_id: str
    status: PaymentAttemptStatus
    amount: Decimal
    error_message: str | None = None
    recorded_by: str | None = None
    attempted_at: datetime


class PaymentVerificationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reference_id: str
    amount: Decimal
    payment_method: PaymentMethod
    received_at: datetime
    verified_by: str
    verified_at: datetime
    internal_note: str | None = None


class PaymentLedgerResponse(BaseModel):
    application_id: int
    payment_status: PaymentStatus
    is_paid: bool
    attempts: list[PaymentAttemptItem]
    verifications: list[PaymentVerificationItem]


class PaymentVerifyResponse(BaseModel):
    verification: PaymentVerificationItem
    application_status: ApplicationStatus
    payment_status: PaymentStatus
