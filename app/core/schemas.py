"""Pagination envelope shared by the list endpoints.

Paginated responses look like:
    {
        "success": true,
        "data": [ ... ],
        "meta": { "total": 100, "page": 1, "limit": 20, "pages": 5 }
    }
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    total: int = Field(..., description="Total number of items")
    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, le=100, description="Items per page")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def from_query(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        pages = (total + limit - 1) // limit if limit > 0 else 0
        return cls(total=total, page=page, limit=limit, pages=pages)


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    meta: PaginationMeta


def paginated_response(data: list[T], total: int, page: int, limit: int) -> PaginatedResponse[T]:
    return PaginatedResponse(data=data, meta=PaginationMeta.from_query(total, page, limit))
