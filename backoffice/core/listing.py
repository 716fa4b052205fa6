"""
In-memory filter, sort and paginate over a fetched collection.

The admin list endpoints load every row of an entity table once and run
them through filter_rows -> sort_rows -> paginate. Which fields a search
term is matched against is decided per entity type by a callable that
yields the row's searchable strings.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

ASC = "asc"
DESC = "desc"
DEFAULT_PAGE_SIZE = 10

Row = Dict[str, Any]
SearchValues = Callable[[Row], Iterable[Optional[str]]]


@dataclass(frozen=True)
class SortState:
    field: str
    direction: str = ASC

    def toggle(self, field: str) -> "SortState":
        """Same field flips direction; a new field starts ascending."""
        if field == self.field:
            return SortState(field, DESC if self.direction == ASC else ASC)
        return SortState(field, ASC)


@dataclass
class Page:
    items: List[Row]
    page: int
    page_size: int
    total_items: int
    total_pages: int


def filter_rows(rows: List[Row], search_term: Optional[str], search_values: SearchValues) -> List[Row]:
    """Case-insensitive substring match; a row matches if any of its values contains the term."""
    if not search_term:
        return list(rows)
    needle = search_term.lower()
    matched = []
    for row in rows:
        for value in search_values(row):
            if value and needle in str(value).lower():
                matched.append(row)
                break
    return matched


def _sort_key(value: Any):
    # None sorts after every value in ascending order
    if value is None:
        return (1, "")
    if isinstance(value, str):
        return (0, value.lower())
    return (0, value)


def sort_rows(rows: List[Row], field: str, direction: str = ASC) -> List[Row]:
    """Stable ascending sort; descending is its exact reverse, so ties flip order too."""
    if direction not in (ASC, DESC):
        raise ValueError(f"Invalid sort direction: {direction}")
    ordered = sorted(rows, key=lambda row: _sort_key(row.get(field)))
    if direction == DESC:
        ordered.reverse()
    return ordered


def paginate(rows: List[Row], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one page; pages past the end clamp to the last page, pages below 1 to the first."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    total_items = len(rows)
    total_pages = math.ceil(total_items / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    start = (current - 1) * page_size
    return Page(
        items=rows[start:start + page_size],
        page=current,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )
