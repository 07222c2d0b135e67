"""Shared pydantic schemas — the response envelope and pagination block.

Learn: Every endpoint answers with the same envelope:
- success: bool, always present
- data: the record or list of records (success only)
- error / details: client-safe message plus per-field problems (failure only)
- pagination: list endpoints only
- message: human-readable note on mutations ("Post deleted")

Field names are snake_case in Python and camelCase on the wire. CamelModel
wires that up once through pydantic's alias generator; routes are declared
with response_model_exclude_unset so absent envelope keys stay absent.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from quillboard.services.query import Pagination

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API schemas: camelCase JSON, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationRead(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_pagination(cls, pagination: Pagination) -> "PaginationRead":
        return cls(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            total_pages=pagination.total_pages,
        )


class Envelope(CamelModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    pagination: Optional[PaginationRead] = None


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    details: Optional[list[ErrorDetail]] = None


def ok(
    data: Any = None,
    message: Optional[str] = None,
    pagination: Optional[Pagination] = None,
) -> Envelope:
    """Build a success envelope carrying only the keys that were given."""
    fields: dict[str, Any] = {"success": True}
    if data is not None:
        fields["data"] = data
    if message is not None:
        fields["message"] = message
    if pagination is not None:
        fields["pagination"] = PaginationRead.from_pagination(pagination)
    return Envelope(**fields)
