# This project was developed with assistance from AI tools.
"""Problem Details (RFC 7807) body returned for every error response."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str = ""
    instance: str = Field(default="", description="Request path that produced the error.")
    request_id: str = Field(default="", description="Echo of X-Request-ID, or a generated UUID.")
    kind: str | None = Field(
        default=None,
        description=(
            "Lifecycle error kind: invalid_transition, unauthorized, precondition_not_met, "
            "duplicate_reference, already_verified, already_signed, validation_error, "
            "conflict, not_found. Absent for plain HTTP errors."
        ),
    )
