# This project was developed with assistance from AI tools.
"""Admin audit trail responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class AuditEventItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: datetime
    event_type: str
    user_id: str | None = None
    user_role: str | None = None
    application_id: int | None = None
    event_data: dict | None = None
    prev_hash: str | None = None


class AuditByApplicationResponse(BaseModel):
    application_id: int
    count: int
    events: list[AuditEventItem]


class AuditChainVerifyResponse(BaseModel):
    """``first_break_id`` is the first event whose stored link does not match."""

    application_id: int
    status: Literal["OK", "TAMPERED"]
    events_checked: int
    first_break_id: int | None = None
