"""Shared schema pieces: month values, pagination envelope, bulk results."""

from datetime import date
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from utility_billing.billing.periods import normalize_month
from utility_billing.services.pagination import Page

T = TypeVar("T")

# "2025-04", "2025-04-01" or an ISO datetime; stored as the first day of the month
Month = Annotated[date, BeforeValidator(normalize_month)]


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    page: int
    limit: int
    total_pages: int


class PageResponse(BaseModel, Generic[T]):
    """List response envelope: {"items": [...], "pagination": {...}}."""

    items: list[T]
    pagination: Pagination

    @classmethod
    def from_page(cls, page: Page) -> "PageResponse[T]":
        return cls.model_validate(
            {
                "items": page.items,
                "pagination": {
                    "total": page.total,
                    "page": page.page,
                    "limit": page.limit,
                    "total_pages": page.total_pages,
                },
            },
            from_attributes=True,
        )


class BulkItemError(BaseModel):
    """One rejected row of a bulk request."""

    mohalla_number: str | None = None
    house_number: str | None = None
    number: str | None = None
    error: str

    model_config = ConfigDict(from_attributes=True)


class BulkResult(BaseModel):
    """Outcome counts of a bulk request."""

    success: int = 0
    failed: int = 0
    skipped: int = Field(default=0, description="Rows left untouched (no data or already done)")
    errors: list[BulkItemError] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
