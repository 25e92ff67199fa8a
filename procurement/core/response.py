"""Response envelopes: `{data}` for one item or a plain list, `{data, meta}` for a page."""


from typing import Generic, TypeVar

from pydantic import BaseModel

from procurement.core.pagination import PageMeta, PaginationParams

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    data: T


class ItemsResponse(BaseModel, Generic[T]):
    """Unpaginated list, e.g. all bids on one tender."""

    data: list[T]


class ListResponse(BaseModel, Generic[T]):
    data: list[T]
    meta: PageMeta


def paginated(items: list, total: int, pagination: PaginationParams) -> dict:
    """Body for a ListResponse route: one page of items plus the paging meta."""
    return {"data": items, "meta": pagination.meta(total)}
