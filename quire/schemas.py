"""Request and response models for the page API."""

from datetime import datetime, UTC
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from quire.db.models import PageStatus, PageTemplate
from quire.lib.pagination import Paginated


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from forms are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UTCDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class MetaData(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=500)
    keywords: str | None = Field(default=None, max_length=255)


class ContentBlockIn(BaseModel):
    priority: int = Field(default=0, ge=0)
    text: str | None = None
    # Stored-file references produced by the upload collaborator
    images: list[str] = Field(default_factory=list)


class PageCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = Field(default=None, max_length=1000)
    content: str = Field(min_length=1)
    status: PageStatus = PageStatus.DRAFT
    template: PageTemplate = PageTemplate.DEFAULT
    sort_order: int = Field(default=0, ge=0)
    published_at: UTCDatetime | None = None
    meta_data: MetaData | None = None
    contents: list[ContentBlockIn] | None = None


class PageUpdate(BaseModel):
    """Partial update: only fields present in the payload are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = Field(default=None, max_length=1000)
    content: str | None = Field(default=None, min_length=1)
    status: PageStatus | None = None
    template: PageTemplate | None = None
    sort_order: int | None = Field(default=None, ge=0)
    published_at: UTCDatetime | None = None
    meta_data: MetaData | None = None
    contents: list[ContentBlockIn] | None = None

    @model_validator(mode="after")
    def _reject_null_required(self) -> "PageUpdate":
        for name in ("title", "content", "status", "template", "sort_order"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class PageFilters(BaseModel):
    status: PageStatus | None = None
    search: str | None = None
    template: PageTemplate | None = None
    per_page: int | None = Field(default=None, ge=1)
    page: int = Field(default=1, ge=1)


class BulkActionRequest(BaseModel):
    action: Literal["delete", "publish", "unpublish", "archive"]
    ids: list[UUID] = Field(min_length=1)


class BulkActionResult(BaseModel):
    action: str
    count: int


class ContentBlockRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    priority: int
    text: str | None
    images: list[str]


class PageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    excerpt: str | None
    content: str
    status: PageStatus
    template: PageTemplate
    sort_order: int
    published_at: datetime | None
    meta_data: dict[str, Any] | None
    meta_title: str
    meta_description: str | None
    is_effectively_published: bool
    created_by: UUID | None
    updated_by: UUID | None
    created_at: datetime
    updated_at: datetime
    contents: list[ContentBlockRead]


class PageList(BaseModel):
    items: list[PageRead]
    page: int
    per_page: int
    total: int
    last_page: int

    @classmethod
    def from_paginated(cls, result: Paginated) -> "PageList":
        return cls(
            items=[PageRead.model_validate(page) for page in result.items],
            page=result.page,
            per_page=result.per_page,
            total=result.total,
            last_page=result.last_page,
        )
