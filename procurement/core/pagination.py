"""Query-string paging for list endpoints."""


import math

from fastapi import Query
from pydantic import BaseModel
from pydantic.alias_generators import to_snake


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class PaginationParams:
    """FastAPI dependency for `?page=1&limit=20&sort=createdAt&order=desc&search=acme`.

    `sort` takes the camelCase field name clients see in responses. A name that
    is not a column of the listed entity leaves the result unordered by it; the
    repository ignores unknown columns.
    """

    def __init__(
        self,
        page: int = Query(default=1, ge=1, description="Page number (1-based)"),
        limit: int = Query(default=20, ge=1, le=200, description="Items per page"),
        sort: str = Query(default="createdAt", description="Field to sort by"),
        order: str = Query(default="desc", pattern="^(asc|desc)$"),
        search: str | None = Query(default=None, description="Case-insensitive substring match"),
    ):
        self.page = page
        self.limit = limit
        self.sort = to_snake(sort.strip()) or "created_at"
        self.order = order
        self.search = (search.strip() or None) if search else None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> PageMeta:
        return PageMeta(
            total=total,
            page=self.page,
            limit=self.limit,
            pages=math.ceil(total / self.limit),
        )
