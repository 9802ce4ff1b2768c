"""Shared pagination helpers for list endpoints"""

import math
from typing import Any, Optional

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SAQuery

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PageParams(BaseModel):
    """Pagination and sorting parameters shared by list endpoints"""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sortBy: Optional[str] = None
    sortOrder: str = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sortBy: Optional[str] = Query(None),
    sortOrder: str = Query("desc", pattern="^(asc|desc)$"),
) -> PageParams:
    """Dependency that reads page/limit/sortBy/sortOrder from the query string"""
    return PageParams(page=page, limit=limit, sortBy=sortBy, sortOrder=sortOrder)


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


def paginate(
    query: SAQuery,
    params: PageParams,
    sort_columns: dict,
    default_sort: str,
    default_order: Optional[str] = None,
) -> tuple[list, int]:
    """
    Apply sorting and a page window to a SQLAlchemy query.

    Unknown sortBy values fall back to default_sort. default_order applies only
    when the caller did not choose a sort column.

    Returns:
        Tuple of (rows, total_count)
    """
    total = query.count()

    sort_key = params.sortBy if params.sortBy in sort_columns else default_sort
    order = params.sortOrder
    if params.sortBy not in sort_columns and default_order:
        order = default_order

    column = sort_columns[sort_key]
    query = query.order_by(column.asc() if order == "asc" else column.desc())

    rows = query.offset(params.offset).limit(params.limit).all()
    return rows, total


def page_response(items: list[Any], total: int, params: PageParams) -> dict:
    """Build the {"items", "meta"} envelope returned by paginated endpoints"""
    total_pages = math.ceil(total / params.limit) if params.limit else 0
    return {
        "items": items,
        "meta": PageMeta(
            page=params.page, limit=params.limit, total=total, totalPages=total_pages
        ).model_dump(),
    }
