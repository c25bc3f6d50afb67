"""
Page/limit arithmetic for list endpoints.

Query values are parsed leniently: anything that is not a positive integer
falls back to the default, and limit is clamped to the configured maximum.
"""

import math
from dataclasses import dataclass

from app.schemas.common import Pagination

# Largest OFFSET a signed 64-bit database integer can hold
MAX_OFFSET = 2**63 - 1


def _positive_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(
        cls,
        page: str | int | None,
        limit: str | int | None,
        *,
        default_limit: int = 10,
        max_limit: int = 50,
    ) -> "PageRequest":
        limit_value = min(_positive_int(limit, default_limit), max_limit)
        # Pages past this point are empty anyway; keep skip + limit within range
        max_page = (MAX_OFFSET - limit_value) // limit_value + 1
        return cls(
            page=min(_positive_int(page, 1), max_page),
            limit=limit_value,
        )

    def describe(self, total_items: int) -> Pagination:
        """Pagination descriptor for a result set of total_items rows."""
        total_pages = math.ceil(total_items / self.limit)
        return Pagination(
            current_page=self.page,
            total_pages=total_pages,
            total_items=total_items,
            has_next=self.page < total_pages,
            has_prev=self.page > 1,
        )
