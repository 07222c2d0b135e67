"""Pydantic schemas for categories and tags."""

from typing import Annotated

from pydantic import Field

from quillboard.schemas.common import CamelModel

# Item type for tag lists in request bodies; matches the tags.name column
TagName = Annotated[str, Field(max_length=100)]


class NameCreate(CamelModel):
    """Body of POST /categories and POST /tags."""
    name: str = Field(..., min_length=1, max_length=100)


class CategoryRead(CamelModel):
    id: int
    name: str


class TagRead(CamelModel):
    id: int
    name: str
