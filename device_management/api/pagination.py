# This file parses the paging and ordering query parameters of the sensor list endpoint.
# Pages are 1-based. Sort input is `field` or `field:asc|desc`, checked against an allowlist.

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

SORT_ORDERS: Final[frozenset[str]] = frozenset({"asc", "desc"})
# OFFSET is bound as a signed 64-bit integer by both SQLite and PostgreSQL.
MAX_ROW_OFFSET: Final[int] = (1 << 63) - 1


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: str = "asc"

    @property
    def as_text(self) -> str:
        return f"{self.field}:{self.order}"


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def normalize_pagination(
    *,
    page: int,
    page_size: int | None,
    default_page_size: int,
    max_page_size: int,
) -> PaginationSpec:
    """Fill in the default page size and reject out-of-range values."""

    size = page_size if page_size is not None else default_page_size
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if not 1 <= size <= max_page_size:
        bound = "page_size must be >= 1" if size < 1 else f"page_size must be <= {max_page_size}"
        raise ValueError(f"{bound}, got {size}")
    pagination = PaginationSpec(page=page, page_size=size)
    if pagination.offset > MAX_ROW_OFFSET:
        raise ValueError(f"page is out of range, got {page}")
    return pagination


def parse_sort(
    *,
    requested_sort: str | None,
    default_sort: str,
    allowed_fields: set[str],
) -> SortSpec:
    raw = (requested_sort or default_sort).strip().lower()
    field, _, order = raw.partition(":")
    if not field:
        raise ValueError("sort cannot be empty")
    if field not in allowed_fields:
        raise ValueError(
            f"Unsupported sort field '{field}'. Supported fields: {', '.join(sorted(allowed_fields))}"
        )

    sort_spec = SortSpec(field=field, order=order or "asc")
    if sort_spec.order not in SORT_ORDERS:
        raise ValueError(f"sort order must be 'asc' or 'desc', got '{sort_spec.order}'")
    return sort_spec


def compute_total_pages(*, total_count: int, page_size: int) -> int:
    return -(-max(total_count, 0) // page_size)
