"""Typed list queries — filters, sorting and pagination for list endpoints.

A list request becomes a ListQuery: page/limit, an optional sort key and a
list of Filter values. Each filter kind is its own small dataclass, and
every field a filter or sort key may touch is looked up in the resource's
ResourceQuerySpec allow-list. Client-supplied names never reach SQL
directly:

- unknown sort keys fall back to the resource default (silently)
- unknown sort orders fall back to the resource default order
- a filter naming a field outside the allow-list is a programming error
  and raises UnsupportedFilterError

Usage:
    query = ListQuery(page=2, limit=10, sort_by="title",
                      filters=[TextSearch("fastapi"), FlagIs("published", True)])
    page = await paginate(db, POST_QUERY_SPEC, query)
"""

from dataclasses import dataclass, field
from math import ceil
from typing import Any, Optional, Sequence, Union

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.db.models import Tag

# ═══════════════════════════════════════════════════════════
# Filter kinds
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match over the resource's search columns."""
    term: str


@dataclass(frozen=True)
class CategoryIs:
    name: str


@dataclass(frozen=True)
class HasAnyTag:
    names: tuple[str, ...]


@dataclass(frozen=True)
class FlagIs:
    field: str
    value: bool


@dataclass(frozen=True)
class FieldEquals:
    field: str
    value: int


Filter = Union[TextSearch, CategoryIs, HasAnyTag, FlagIs, FieldEquals]


class UnsupportedFilterError(ValueError):
    """Raised when a filter targets a field the resource does not allow."""


# ═══════════════════════════════════════════════════════════
# Per-resource allow-lists
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ResourceQuerySpec:
    """What one resource lets clients search, filter and sort by.

    Keys of sort_columns, flag_columns and equality_columns are the public
    (camelCase) names used in query strings.
    """

    model: type
    sort_columns: dict[str, Any]
    default_sort: str
    default_order: str = "desc"
    search_columns: tuple[Any, ...] = ()
    flag_columns: dict[str, Any] = field(default_factory=dict)
    equality_columns: dict[str, Any] = field(default_factory=dict)
    category_relation: Any = None
    tags_relation: Any = None


@dataclass
class ListQuery:
    page: int = 1
    limit: int = 10
    filters: list[Filter] = field(default_factory=list)
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit)


@dataclass
class Page:
    items: list
    pagination: Pagination


# ═══════════════════════════════════════════════════════════
# Compilation
# ═══════════════════════════════════════════════════════════


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(spec: ResourceQuerySpec, filters: Sequence[Filter]) -> list:
    """Translate filters into SQLAlchemy WHERE clauses."""
    conditions = []
    for f in filters:
        if isinstance(f, TextSearch):
            term = f.term.strip()
            if not term or not spec.search_columns:
                continue
            pattern = f"%{_escape_like(term)}%"
            conditions.append(
                or_(*(col.ilike(pattern, escape="\\") for col in spec.search_columns))
            )
        elif isinstance(f, CategoryIs):
            if spec.category_relation is None:
                raise UnsupportedFilterError(f"{spec.model.__name__} has no category")
            conditions.append(spec.category_relation.has(name=f.name))
        elif isinstance(f, HasAnyTag):
            if spec.tags_relation is None:
                raise UnsupportedFilterError(f"{spec.model.__name__} has no tags")
            if f.names:
                conditions.append(spec.tags_relation.any(Tag.name.in_(f.names)))
        elif isinstance(f, FlagIs):
            column = spec.flag_columns.get(f.field)
            if column is None:
                raise UnsupportedFilterError(f"Cannot filter by flag '{f.field}'")
            conditions.append(column.is_(f.value))
        elif isinstance(f, FieldEquals):
            column = spec.equality_columns.get(f.field)
            if column is None:
                raise UnsupportedFilterError(f"Cannot filter by field '{f.field}'")
            conditions.append(column == f.value)
        else:
            raise UnsupportedFilterError(f"Unknown filter: {f!r}")
    return conditions


def resolve_order(
    spec: ResourceQuerySpec,
    sort_by: Optional[str],
    sort_order: Optional[str],
) -> list:
    """ORDER BY clauses for a sort request, falling back to the defaults."""
    key = sort_by if sort_by in spec.sort_columns else spec.default_sort
    column = spec.sort_columns[key]

    direction = (sort_order or "").lower()
    if direction not in ("asc", "desc"):
        direction = spec.default_order

    primary_key = spec.model.id
    order = [column.asc() if direction == "asc" else column.desc()]
    if column is not primary_key:
        # Stable pages when the sort column has ties
        order.append(primary_key.asc() if direction == "asc" else primary_key.desc())
    return order


async def paginate(
    db: AsyncSession,
    spec: ResourceQuerySpec,
    query: ListQuery,
    options: Sequence = (),
) -> Page:
    """Run a list query: one SELECT for the page, one COUNT for the total."""
    conditions = build_conditions(spec, query.filters)

    stmt = (
        select(spec.model)
        .where(*conditions)
        .order_by(*resolve_order(spec, query.sort_by, query.sort_order))
        .offset(query.offset)
        .limit(query.limit)
    )
    if options:
        stmt = stmt.options(*options)
    count_stmt = select(func.count()).select_from(spec.model).where(*conditions)

    result = await db.execute(stmt)
    items = list(result.scalars().all())
    total = (await db.execute(count_stmt)).scalar_one()

    return Page(
        items=items,
        pagination=Pagination(page=query.page, limit=query.limit, total=total),
    )
