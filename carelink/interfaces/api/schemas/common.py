"""Shared pydantic building blocks for API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from carelink.domain.entities import Pagination


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationRead(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_domain(cls, pagination: Pagination) -> "PaginationRead":
        return cls(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            total_pages=pagination.total_pages,
        )


class MessageResponse(CamelModel):
    success: bool = True
    message: str


__all__ = ["CamelModel", "MessageResponse", "PaginationRead"]
