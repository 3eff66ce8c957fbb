"""Paginated list envelopes."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    """Pagination metadata returned with list responses."""

    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    offset: int = Field(ge=0)


class Page(BaseModel, Generic[T]):
    """One page of results plus its pagination metadata."""

    data: list[T]
    pagination: Pagination
