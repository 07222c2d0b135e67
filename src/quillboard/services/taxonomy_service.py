"""Category and tag service — upsert-by-name plus read endpoints.

Category and Tag names are globally unique. Posts and tasks reference them
by name, and a name that does not exist yet is created on the spot. Two
requests racing to create the same name must converge on one row, so the
insert is an INSERT ... ON CONFLICT DO NOTHING against the unique
constraint, followed by a plain SELECT.
"""

from typing import Iterable, Optional, Union

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.db.models import Category, Tag
from quillboard.errors import NotFoundError, ValidationError
from quillboard.services.query import ListQuery, Page, ResourceQuerySpec, paginate

logger = structlog.get_logger()

TaxonomyModel = Union[type[Category], type[Tag]]

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def normalize_names(names: Iterable[str]) -> list[str]:
    """Strip, drop blanks, de-duplicate (first occurrence wins)."""
    seen: dict[str, None] = {}
    for name in names:
        cleaned = (name or "").strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


async def _insert_missing(db: AsyncSession, model: TaxonomyModel, names: list[str]) -> int:
    """Insert names that do not exist yet. Returns how many rows were created."""
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is not None:
        stmt = (
            insert(model)
            .values([{"name": n} for n in names])
            .on_conflict_do_nothing(index_elements=["name"])
        )
        result = await db.execute(stmt)
        return max(result.rowcount or 0, 0)

    # Other dialects: check-then-insert inside the request transaction.
    existing = set(
        (await db.execute(select(model.name).where(model.name.in_(names)))).scalars()
    )
    missing = [n for n in names if n not in existing]
    db.add_all(model(name=n) for n in missing)
    await db.flush()
    return len(missing)


async def upsert_by_name(
    db: AsyncSession, model: TaxonomyModel, name: str
) -> tuple[Union[Category, Tag], bool]:
    """Return (row, created) for a single category or tag name."""
    cleaned = normalize_names([name])
    if not cleaned:
        raise ValidationError(
            details=[{"field": "name", "message": "Name must not be empty"}]
        )
    name = cleaned[0]

    q = select(model).where(model.name == name)
    row = (await db.execute(q)).scalars().first()
    if row is not None:
        return row, False

    created = await _insert_missing(db, model, [name]) > 0
    row = (await db.execute(q)).scalars().one()
    return row, created


async def upsert_category(db: AsyncSession, name: str) -> Category:
    category, _ = await upsert_by_name(db, Category, name)
    return category


async def upsert_tags(db: AsyncSession, names: Iterable[str]) -> list[Tag]:
    """Resolve tag names to rows, creating the missing ones."""
    names = normalize_names(names)
    if not names:
        return []
    await _insert_missing(db, Tag, names)
    result = await db.execute(select(Tag).where(Tag.name.in_(names)))
    by_name = {t.name: t for t in result.scalars().all()}
    return [by_name[n] for n in names]


CATEGORY_QUERY_SPEC = ResourceQuerySpec(
    model=Category,
    sort_columns={"id": Category.id, "name": Category.name},
    default_sort="name",
    default_order="asc",
    search_columns=(Category.name,),
)

TAG_QUERY_SPEC = ResourceQuerySpec(
    model=Tag,
    sort_columns={"id": Tag.id, "name": Tag.name},
    default_sort="name",
    default_order="asc",
    search_columns=(Tag.name,),
)


class TaxonomyService:
    """Read and create endpoints shared by categories and tags."""

    def __init__(self, db: AsyncSession, model: TaxonomyModel):
        self.db = db
        self.model = model
        self.spec = CATEGORY_QUERY_SPEC if model is Category else TAG_QUERY_SPEC
        self.label = "Category" if model is Category else "Tag"

    async def list_items(self, query: ListQuery) -> Page:
        return await paginate(self.db, self.spec, query)

    async def get(self, item_id: int) -> Optional[Union[Category, Tag]]:
        result = await self.db.execute(select(self.model).where(self.model.id == item_id))
        return result.scalars().first()

    async def get_or_404(self, item_id: int) -> Union[Category, Tag]:
        row = await self.get(item_id)
        if row is None:
            raise NotFoundError(f"{self.label} not found")
        return row

    async def create(self, name: str) -> tuple[Union[Category, Tag], bool]:
        row, created = await upsert_by_name(self.db, self.model, name)
        await self.db.commit()
        if created:
            logger.info("taxonomy.created", kind=self.label.lower(), name=row.name, id=row.id)
        return row, created
