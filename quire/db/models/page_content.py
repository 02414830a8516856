from typing import TYPE_CHECKING
from uuid import UUID

from advanced_alchemy.types import JsonB
from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quire.db.base import Base

if TYPE_CHECKING:
    from quire.db.models.page import Page


class PageContent(Base):
    """An ordered content block owned by a single page."""

    __tablename__ = "page_contents"

    page_id: Mapped[UUID] = mapped_column(
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    page: Mapped["Page"] = relationship("Page", back_populates="contents")

    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Opaque stored-file references, in display order
    images: Mapped[list[str]] = mapped_column(JsonB, nullable=False, default=list)
