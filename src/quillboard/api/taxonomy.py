"""Category and tag routes.

Learn: Both resources have the same shape (id + unique name) and the same
three endpoints, so one builder produces both routers. POST is an upsert:
201 when the name is new, 200 with the existing row when it is not.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.api.params import ListParams
from quillboard.auth.dependencies import get_current_user
from quillboard.auth.jwt import Identity
from quillboard.db.engine import get_db
from quillboard.db.models import Category, Tag
from quillboard.schemas.common import CamelModel, Envelope, ok
from quillboard.schemas.taxonomy import CategoryRead, NameCreate, TagRead
from quillboard.services.taxonomy_service import TaxonomyModel, TaxonomyService


def build_router(model: TaxonomyModel, prefix: str, read_schema: type[CamelModel]) -> APIRouter:
    router = APIRouter(prefix=prefix)
    label = model.__name__

    def _svc(db: AsyncSession = Depends(get_db)) -> TaxonomyService:
        return TaxonomyService(db, model)

    @router.get("", response_model=Envelope[list[read_schema]], response_model_exclude_unset=True)
    async def list_items(params: ListParams = Depends(), svc: TaxonomyService = Depends(_svc)):
        page = await svc.list_items(params.to_query())
        return ok([read_schema.model_validate(r) for r in page.items], pagination=page.pagination)

    @router.get("/{item_id}", response_model=Envelope[read_schema], response_model_exclude_unset=True)
    async def get_item(item_id: int, svc: TaxonomyService = Depends(_svc)):
        return ok(read_schema.model_validate(await svc.get_or_404(item_id)))

    @router.post(
        "", response_model=Envelope[read_schema], response_model_exclude_unset=True, status_code=201
    )
    async def create_item(
        body: NameCreate,
        response: Response,
        identity: Identity = Depends(get_current_user),
        svc: TaxonomyService = Depends(_svc),
    ):
        row, created = await svc.create(body.name)
        if not created:
            response.status_code = 200
            return ok(read_schema.model_validate(row), message=f"{label} already exists")
        return ok(read_schema.model_validate(row), message=f"{label} created")

    return router


categories_router = build_router(Category, "/categories", CategoryRead)
tags_router = build_router(Tag, "/tags", TagRead)
