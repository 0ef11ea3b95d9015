"""Pagination parameters and response block shared by listing endpoints."""

import math

from pydantic import BaseModel, Field


class PageParams(BaseModel):
    """1-based page request."""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination block returned alongside listed items."""
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    total_items: int = Field(serialization_alias="totalItems")
    items_per_page: int = Field(serialization_alias="itemsPerPage")

    @classmethod
    def build(cls, params: PageParams, total: int) -> "Pagination":
        """Compute the block for `total` items split into pages of `params.limit`.

        Example:
            >>> Pagination.build(PageParams(page=2, limit=10), 25).total_pages
            3
        """
        return cls(
            current_page=params.page,
            total_pages=math.ceil(total / params.limit),
            total_items=total,
            items_per_page=params.limit,
        )
