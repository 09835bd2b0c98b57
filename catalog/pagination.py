"""
Pagination arithmetic.

    paginate(page=2, limit=3, total=5)
        → PageInfo(page=2, limit=3, offset=3, total=5, total_pages=2, ...)

A page past the end is not an error: it fetches an empty range and reports
has_next=False.
"""

import math
from dataclasses import dataclass

from catalog.config import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from catalog.models import Pagination


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def last_row(self) -> int:
        """Inclusive end of the storage range [offset, last_row]."""
        return self.offset + self.limit - 1


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    offset: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    def to_pagination(self) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=self.total,
            totalPages=self.total_pages,
            hasNext=self.has_next,
            hasPrev=self.has_prev,
        )


def clamp_window(
    page: int | None,
    limit: int | None,
    max_limit: int = MAX_LIMIT,
) -> PageWindow:
    """Apply defaults, then clamp limit to [1, max_limit] and page to >= 1."""
    limit = DEFAULT_LIMIT if limit is None else limit
    page = DEFAULT_PAGE if page is None else page
    return PageWindow(page=max(page, 1), limit=min(max(limit, 1), max_limit))


def paginate(
    page: int | None,
    limit: int | None,
    total: int,
    max_limit: int = MAX_LIMIT,
) -> PageInfo:
    window = clamp_window(page, limit, max_limit)
    total = max(total, 0)
    total_pages = math.ceil(total / window.limit)
    return PageInfo(
        page=window.page,
        limit=window.limit,
        offset=window.offset,
        total=total,
        total_pages=total_pages,
        has_next=window.page < total_pages,
        has_prev=window.page > 1,
    )
