"""
Pagination & Sorting

Normalizes page/limit/sort inputs into bounded, deterministic parameters.

DESIGN RULES:
- limit is ALWAYS clamped to [1, MAX_LIMIT]; the store never sees an unbounded scan
- page is at least 1
- Pure functions, no I/O
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


class SortDirection(IntEnum):
    ASC = 1
    DESC = -1


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int
    skip: int
    sort_field: str
    sort_direction: SortDirection


def clamp_limit(limit: Optional[int], default: int = DEFAULT_LIMIT) -> int:
    if limit is None:
        limit = default
    return max(1, min(int(limit), MAX_LIMIT))


def normalize(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    default_sort_field: str = "start_time",
    default_limit: int = DEFAULT_LIMIT,
) -> PageParams:
    """
    Normalize raw pagination inputs.

    Args:
        page: Requested page (1-based); values below 1 become 1
        limit: Requested page size; clamped to [1, MAX_LIMIT]
        sort_by: Field to sort on; defaults to default_sort_field
        sort_order: "asc" or "desc"; anything else sorts descending

    Returns:
        PageParams with skip = (page - 1) * limit
    """
    safe_page = max(DEFAULT_PAGE, int(page)) if page is not None else DEFAULT_PAGE
    safe_limit = clamp_limit(limit, default_limit)
    direction = SortDirection.ASC if (sort_order or "").lower() == "asc" else SortDirection.DESC

    return PageParams(
        page=safe_page,
        limit=safe_limit,
        skip=(safe_page - 1) * safe_limit,
        sort_field=sort_by or default_sort_field,
        sort_direction=direction,
    )


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); zero when there is nothing to page."""
    if total <= 0 or limit <= 0:
        return 0
    return math.ceil(total / limit)
