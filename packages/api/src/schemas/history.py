# This project was developed with assistance from AI tools.
"""Merged application history and comment schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HistoryEvent(BaseModel):
    """One entry in the merged per-application activity stream.

    ``event_type`` is one of ``status_change``, ``payment_attempt``,
    ``payment_verification``, or ``comment``. ``details`` holds the
    source-specific fields.
    """

    event_type: str
    timestamp: datetime
    actor_id: str | None = None
    status: str | None = None
    reason: str | None = None
    details: dict = Field(default_factory=dict)


class HistoryResponse(BaseModel):
    application_id: int
    count: int
    events: list[HistoryEvent]


class CommentCreate(BaseModel):
    body: str = Field(min_length=1)
    is_internal: bool = True


class CommentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: str
    author_role: str | None = None
    body: str
    is_internal: bool
    created_at: datetime
