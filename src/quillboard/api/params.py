"""Query-string parameters shared by the list endpoints."""

from typing import Optional

from fastapi import Query

from quillboard.services.query import Filter, ListQuery, TextSearch


class ListParams:
    """page/limit/search/sortBy/sortOrder, validated by FastAPI.

    Out-of-range page or limit is a 400; unknown sort keys and orders are
    accepted here and fall back to the resource defaults later.
    """

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        search: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
    ):
        self.page = page
        self.limit = limit
        self.search = search
        self.sort_by = sort_by
        self.sort_order = sort_order

    def to_query(self, filters: Optional[list[Filter]] = None) -> ListQuery:
        filters = list(filters or [])
        if self.search and self.search.strip():
            filters.insert(0, TextSearch(self.search))
        return ListQuery(
            page=self.page,
            limit=self.limit,
            filters=filters,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )


def split_tags(values: Optional[list[str]]) -> tuple[str, ...]:
    """?tags=a,b and ?tags=a&tags=b both mean (a, b)."""
    names: list[str] = []
    for value in values or []:
        for name in value.split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return tuple(names)
