"""Shared API schema pieces: ORM base model and page envelope."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from projecthub.application.dtos.pagination import Page


class ORMModel(BaseModel):
    """Response model read from ORM attributes."""

    model_config = ConfigDict(from_attributes=True)


class Timestamped(ORMModel):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


def metadata_field() -> Any:
    """JSON metadata column: mapped as metadata_, exposed as metadata."""
    return Field(default=None, validation_alias=AliasChoices("metadata_", "metadata"))


T = TypeVar("T", bound=BaseModel)


class PageResponse(BaseModel, Generic[T]):
    """One page of items with paging metadata."""

    data: list[T]
    total: int
    page: int
    per_page: int
    last_page: int

    @classmethod
    def from_page(cls, page: Page, item_model: type[T]) -> "PageResponse[T]":
        return cls(
            data=[item_model.model_validate(item) for item in page.items],
            total=page.total,
            page=page.page,
            per_page=page.per_page,
            last_page=page.last_page,
        )


class DeletedResponse(BaseModel):
    deleted: bool = True
