# This project was developed with assistance from AI tools.
"""Lease signing request/response schemas."""

from datetime import datetime

from db.enums import LeaseSignatureStatus, SignerRole
from pydantic import BaseModel, ConfigDict, Field


class DisclosureItem(BaseModel):
    id: str
    label: str
    text: str


class LeaseSignRequest(BaseModel):
    """Signature submission. Length rules are enforced by the service."""

    signer_name: str = ""
    signature_data: str = ""
    acknowledgments: dict[str, bool] = Field(default_factory=dict)


class LeaseSignatureItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    signer_role: SignerRole
    signer_user_id: str
    signer_name: str
    state_code: str | None = None
    disclosure_ids: list[str] | None = None
    ip_address: str | None = None
    signed_at: datetime


class LeaseStatusResponse(BaseModel):
    application_id: int
    lease_signature_status: LeaseSignatureStatus | None = None
    state_code: str | None = None
    disclosures: list[DisclosureItem]
    signatures: list[LeaseSignatureItem]
    next_signer: SignerRole | None = None
    fully_signed_at: datetime | None = None


class SigningDraftRequest(BaseModel):
    form_data: dict = Field(default_factory=dict)


class SigningDraftResponse(BaseModel):
    application_id: int
    form_data: dict
    saved_at: datetime
