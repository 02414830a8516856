"""Page management admin API."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, delete, get, post, put
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Parameter
from sqlalchemy.ext.asyncio import AsyncSession

from quire.controllers.helpers import clamp_per_page, provide_actor
from quire.db.models import PageStatus, PageTemplate
from quire.db.services import page_service
from quire.schemas import (
    BulkActionRequest,
    BulkActionResult,
    PageCreate,
    PageFilters,
    PageList,
    PageRead,
    PageUpdate,
)


class PageAdminController(Controller):
    """CRUD, lifecycle and bulk endpoints over pages of every status."""

    path = "/admin/pages"
    dependencies = {"actor": Provide(provide_actor)}

    @get("/")
    async def list_pages(
        self,
        db_session: AsyncSession,
        state: State,
        status: PageStatus | None = None,
        search: str | None = None,
        template: PageTemplate | None = None,
        per_page: int | None = Parameter(default=None, ge=1),
        page: int = Parameter(default=1, ge=1),
    ) -> dict[str, Any]:
        """List pages with filters, plus the counters, recent pages and choices the admin index shows."""
        filters = PageFilters(status=status, search=search, template=template, per_page=per_page, page=page)
        result = await page_service.list_pages(
            db_session,
            status=filters.status,
            search=filters.search,
            template=filters.template,
            per_page=clamp_per_page(state, filters.per_page),
            page=filters.page,
        )
        return {
            "pages": PageList.from_paginated(result).model_dump(mode="json"),
            "statistics": await page_service.get_statistics(db_session),
            "recent": [
                PageRead.model_validate(recent).model_dump(mode="json")
                for recent in await page_service.list_recent_pages(db_session)
            ],
            "filters": filters.model_dump(mode="json", exclude_none=True),
            "statuses": page_service.available_statuses(),
            "templates": page_service.available_templates(),
        }

    @get("/{page_id:uuid}")
    async def show_page(self, db_session: AsyncSession, page_id: UUID) -> PageRead:
        page = await page_service.require_page(db_session, page_id)
        return PageRead.model_validate(page)

    @post("/")
    async def create_page(
        self, db_session: AsyncSession, data: PageCreate, actor: UUID | None
    ) -> PageRead:
        page = await page_service.create_page(db_session, **data.model_dump(), actor=actor)
        return PageRead.model_validate(page)

    @put("/{page_id:uuid}")
    async def update_page(
        self, db_session: AsyncSession, page_id: UUID, data: PageUpdate, actor: UUID | None
    ) -> PageRead:
        page = await page_service.update_page(
            db_session, page_id, **data.model_dump(exclude_unset=True), actor=actor
        )
        return PageRead.model_validate(page)

    @delete("/{page_id:uuid}")
    async def delete_page(self, db_session: AsyncSession, page_id: UUID) -> None:
        await page_service.delete_page(db_session, page_id)

    @post("/{page_id:uuid}/publish", status_code=200)
    async def publish_page(
        self, db_session: AsyncSession, page_id: UUID, actor: UUID | None
    ) -> PageRead:
        page = await page_service.publish_page(db_session, page_id, actor=actor)
        return PageRead.model_validate(page)

    @post("/{page_id:uuid}/unpublish", status_code=200)
    async def unpublish_page(
        self, db_session: AsyncSession, page_id: UUID, actor: UUID | None
    ) -> PageRead:
        page = await page_service.unpublish_page(db_session, page_id, actor=actor)
        return PageRead.model_validate(page)

    @post("/{page_id:uuid}/archive", status_code=200)
    async def archive_page(
        self, db_session: AsyncSession, page_id: UUID, actor: UUID | None
    ) -> PageRead:
        page = await page_service.archive_page(db_session, page_id, actor=actor)
        return PageRead.model_validate(page)

    @post("/{page_id:uuid}/duplicate")
    async def duplicate_page(
        self, db_session: AsyncSession, page_id: UUID, actor: UUID | None
    ) -> PageRead:
        page = await page_service.duplicate_page(db_session, page_id, actor=actor)
        return PageRead.model_validate(page)

    @post("/bulk", status_code=200)
    async def bulk(
        self, db_session: AsyncSession, data: BulkActionRequest, actor: UUID | None
    ) -> BulkActionResult:
        """Apply delete/publish/unpublish/archive to a set of page ids."""
        count = await page_service.apply_bulk_action(db_session, data.action, data.ids, actor=actor)
        return BulkActionResult(action=data.action, count=count)
