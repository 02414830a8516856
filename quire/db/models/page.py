from datetime import datetime, UTC
from enum import StrEnum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from advanced_alchemy.types import GUID, DateTimeUTC, JsonB
from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quire.db.base import Base

if TYPE_CHECKING:
    from quire.db.models.page_content import PageContent


class PageStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PageTemplate(StrEnum):
    DEFAULT = "default"
    LANDING = "landing"
    BLOG = "blog"
    PORTFOLIO = "portfolio"
    CONTACT = "contact"


META_KEYS = ("title", "description", "keywords")


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Page(Base):
    """Page model for content management."""

    __tablename__ = "pages"

    # Content fields
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    excerpt: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Presentation
    template: Mapped[PageTemplate] = mapped_column(
        Enum(PageTemplate, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=PageTemplate.DEFAULT,
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    # Publication fields
    status: Mapped[PageStatus] = mapped_column(
        Enum(PageStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=PageStatus.DRAFT,
        index=True,
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTimeUTC(timezone=True), nullable=True, index=True)

    # SEO overrides: title / description / keywords
    meta_data: Mapped[dict[str, Any] | None] = mapped_column(JsonB, nullable=True)

    # Acting identities (no users table; auth lives outside this package)
    created_by: Mapped[UUID | None] = mapped_column(GUID(length=16), nullable=True, index=True)
    updated_by: Mapped[UUID | None] = mapped_column(GUID(length=16), nullable=True)

    contents: Mapped[list["PageContent"]] = relationship(
        "PageContent",
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="PageContent.priority",
        lazy="selectin",
    )

    def publish(self, at: datetime | None = None) -> None:
        self.status = PageStatus.PUBLISHED
        self.published_at = at or datetime.now(UTC)

    def unpublish(self) -> None:
        # published_at is left alone; visibility also checks status
        self.status = PageStatus.DRAFT

    def archive(self) -> None:
        self.status = PageStatus.ARCHIVED

    def is_visible_at(self, now: datetime) -> bool:
        """Python mirror of ``page_service.published_filter``."""
        if self.status != PageStatus.PUBLISHED:
            return False
        return self.published_at is None or self.published_at <= now

    @property
    def is_effectively_published(self) -> bool:
        return self.is_visible_at(datetime.now(UTC))

    @property
    def meta_title(self) -> str:
        return (self.meta_data or {}).get("title") or self.title

    @property
    def meta_description(self) -> str | None:
        return (self.meta_data or {}).get("description") or self.excerpt


def prune_meta_data(meta_data: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop falsy entries so empty strings are never stored."""
    if meta_data is None:
        return None
    return {key: value for key, value in meta_data.items() if value}
