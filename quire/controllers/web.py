"""Public, read-only page endpoints."""

from litestar import Controller, get
from litestar.datastructures import State
from litestar.exceptions import NotFoundException
from litestar.params import Parameter
from sqlalchemy.ext.asyncio import AsyncSession

from quire.controllers.helpers import clamp_per_page
from quire.db.services import page_service
from quire.schemas import PageList, PageRead


class PageController(Controller):
    path = "/pages"

    @get("/")
    async def index(
        self,
        db_session: AsyncSession,
        state: State,
        per_page: int | None = Parameter(default=None, ge=1),
        page: int = Parameter(default=1, ge=1),
    ) -> PageList:
        """List effectively published pages."""
        result = await page_service.list_published_pages(
            db_session,
            per_page=clamp_per_page(state, per_page, public=True),
            page=page,
        )
        return PageList.from_paginated(result)

    @get("/{slug:str}")
    async def show(self, db_session: AsyncSession, slug: str) -> PageRead:
        """Show a published page; its ``template`` tells the renderer which layout to use."""
        page = await page_service.get_page_by_slug(db_session, slug, published_only=True)
        if not page:
            raise NotFoundException(f"Page '{slug}' not found")
        return PageRead.model_validate(page)
