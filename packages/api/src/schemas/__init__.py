# This project was developed with assistance from AI tools.
"""Schema components shared by list endpoints."""

from pydantic import BaseModel


class Pagination(BaseModel):
    total: int
    offset: int
    limit: int
    has_more: bool

    @classmethod
    def page(cls, total: int, offset: int, limit: int) -> "Pagination":
        return cls(total=total, offset=offset, limit=limit, has_more=offset + limit < total)
