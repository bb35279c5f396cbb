"""
Listing query composition.

Turns raw query-string values from `/all-cars` and `/cars-count` into a
`ListingQuery`, then into a store `Query`. Values are never used as operators,
only as predicate operands.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.documents import AnyOf, Contains, Equals, Predicate, Query, Sort

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 4
# OFFSET and LIMIT are bigint in Postgres; larger windows are clamped to this.
MAX_WINDOW = 2**62

SEARCH_FIELDS = ("model_name", "brand_name", "category")
SORT_FIELD = "deadline"
SORT_DIRECTIONS = {"asc": False, "dsc": True}


def coerce_non_negative_int(raw: str | int | None, default: int) -> int:
    """
    Parse a query-string integer; anything malformed or negative becomes `default`.
    """
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 0 else default


@dataclass(frozen=True)
class ListingQuery:
    brand: str | None = None
    search: str | None = None
    sort: str | None = None
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return min(self.page * self.size, MAX_WINDOW)

    def predicates(self) -> tuple[Predicate, ...]:
        where: list[Predicate] = []
        if self.brand:
            where.append(Equals("brand_name", self.brand))
        if self.search:
            where.append(AnyOf(tuple(Contains(field, self.search) for field in SEARCH_FIELDS)))
        return tuple(where)

    def order(self) -> Sort | None:
        if self.sort not in SORT_DIRECTIONS:
            return None
        return Sort(SORT_FIELD, descending=SORT_DIRECTIONS[self.sort])

    def to_query(self) -> Query:
        return Query(where=self.predicates(), sort=self.order(), skip=self.skip, limit=self.size)


def compose_listing(
    *,
    brand: str | None = None,
    search: str | None = None,
    sort: str | None = None,
    page: str | int | None = None,
    size: str | int | None = None,
) -> ListingQuery:
    page_size = coerce_non_negative_int(size, DEFAULT_PAGE_SIZE)
    if page_size == 0:
        page_size = DEFAULT_PAGE_SIZE
    return ListingQuery(
        brand=brand or None,
        search=search or None,
        sort=sort if sort in SORT_DIRECTIONS else None,
        page=min(coerce_non_negative_int(page, DEFAULT_PAGE), MAX_WINDOW),
        size=min(page_size, MAX_WINDOW),
    )


def compose_count(*, brand: str | None = None, search: str | None = None) -> ListingQuery:
    # Same predicates as the listing, no sort or window.
    return ListingQuery(brand=brand or None, search=search or None)
