"""Page service for CRUD, lifecycle and bulk operations on pages."""

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, UTC
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Select, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quire.db.models import Page, PageContent, PageStatus, PageTemplate, prune_meta_data
from quire.lib.exceptions import PageNotFoundError, SlugConflictError
from quire.lib.pagination import Paginated, paginate
from quire.lib.slugs import FALLBACK_SLUG, collision_prefix, next_free_slug, slugify

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 15

RECENT_PAGES_LIMIT = 5

MAX_TITLE_LENGTH = 255

COPY_SUFFIX = " (Copy)"

TEMPLATE_LABELS: dict[PageTemplate, str] = {
    PageTemplate.DEFAULT: "Default Template",
    PageTemplate.LANDING: "Landing Page",
    PageTemplate.BLOG: "Blog Post",
    PageTemplate.PORTFOLIO: "Portfolio Item",
    PageTemplate.CONTACT: "Contact Page",
}

STATUS_LABELS: dict[PageStatus, str] = {
    PageStatus.DRAFT: "Draft",
    PageStatus.PUBLISHED: "Published",
    PageStatus.ARCHIVED: "Archived",
}

# Columns a bulk update may touch. Slugs are excluded: a set-based UPDATE
# cannot resolve per-row collisions.
BULK_FIELDS = frozenset({"status", "published_at", "template", "sort_order"})

BULK_ACTIONS = ("delete", "publish", "unpublish", "archive")

_UNSET: Any = object()  # Sentinel for distinguishing None from "not provided"


@asynccontextmanager
async def transaction(db_session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield db_session
        await db_session.commit()
    except Exception:
        await db_session.rollback()
        raise


def _is_slug_violation(exc: IntegrityError) -> bool:
    return "slug" in str(exc.orig).lower()


async def _flush_claiming_slug(db_session: AsyncSession, slug: str) -> None:
    """Flush pending writes, surfacing a unique-slug violation as a conflict."""
    try:
        await db_session.flush()
    except IntegrityError as exc:
        if _is_slug_violation(exc):
            raise SlugConflictError(slug) from exc
        raise


def published_filter(now: datetime | None = None) -> list[ColumnElement[bool]]:
    """SQL clauses for effective publication.

    A page is visible when its status is published and it either has no
    publication time or that time has already passed.
    """
    now = now or datetime.now(UTC)
    return [
        Page.status == PageStatus.PUBLISHED,
        or_(Page.published_at.is_(None), Page.published_at <= now),
    ]


def _ordered(query: Select) -> Select:
    return query.order_by(Page.sort_order.desc(), Page.created_at.desc())


async def ensure_unique_slug(
    db_session: AsyncSession,
    candidate: str | None,
    title: str | None = None,
    exclude_id: UUID | None = None,
) -> str:
    """Resolve a free slug for a page.

    The candidate is normalized with ``slugify``; when it is empty the slug is
    derived from ``title`` instead. Collisions get ``-1``, ``-2``, ... appended
    until a free value is found. The page identified by ``exclude_id`` does not
    count as a collision, so a page may keep its own slug.

    This only reads. Callers claim the result inside the same transaction as
    the write that stores it.
    """
    base = slugify(candidate or "") or slugify(title or "") or FALLBACK_SLUG

    # Counter suffixes may shorten the base, so match on the shared prefix
    query = select(Page.slug).where(
        Page.slug.startswith(collision_prefix(base), autoescape=True)
    )
    if exclude_id is not None:
        query = query.where(Page.id != exclude_id)

    result = await db_session.execute(query)
    slug = next_free_slug(base, set(result.scalars().all()))
    if slug != base:
        logger.debug("Slug %r taken, using %r", base, slug)
    return slug


async def list_pages(
    db_session: AsyncSession,
    status: PageStatus | None = None,
    search: str | None = None,
    template: PageTemplate | None = None,
    per_page: int | None = None,
    page: int = 1,
) -> Paginated[Page]:
    """List pages of every status for the admin.

    Args:
        db_session: Database session
        status: Only pages with this status
        search: Case-insensitive substring matched against title, content or excerpt
        template: Only pages using this template
        per_page: Page size (defaults to 15)
        page: 1-indexed page number

    Returns:
        Paginated pages ordered by sort_order then newest first
    """
    query = select(Page)

    if status:
        query = query.where(Page.status == status)
    if search:
        query = query.where(
            or_(
                Page.title.icontains(search, autoescape=True),
                Page.content.icontains(search, autoescape=True),
                Page.excerpt.icontains(search, autoescape=True),
            )
        )
    if template:
        query = query.where(Page.template == template)

    return await paginate(db_session, _ordered(query), page=page, per_page=per_page or DEFAULT_PER_PAGE)


async def list_published_pages(
    db_session: AsyncSession,
    per_page: int = DEFAULT_PER_PAGE,
    page: int = 1,
) -> Paginated[Page]:
    """List effectively published pages for public display."""
    query = _ordered(select(Page).where(*published_filter()))
    return await paginate(db_session, query, page=page, per_page=per_page)


async def list_recent_pages(
    db_session: AsyncSession,
    limit: int = RECENT_PAGES_LIMIT,
) -> list[Page]:
    """Most recently created pages of any status, newest first."""
    result = await db_session.execute(
        select(Page).order_by(Page.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_page_by_id(
    db_session: AsyncSession,
    page_id: UUID,
) -> Page | None:
    """Get a single page by ID.

    Args:
        db_session: Database session
        page_id: Page UUID

    Returns:
        Page object or None if not found
    """
    result = await db_session.execute(select(Page).where(Page.id == page_id))
    return result.scalar_one_or_none()


async def get_page_by_slug(
    db_session: AsyncSession,
    slug: str,
    published_only: bool = False,
) -> Page | None:
    """Get a single page by slug.

    Args:
        db_session: Database session
        slug: Page slug
        published_only: Only return if effectively published (respects scheduling)

    Returns:
        Page object or None if not found
    """
    query = select(Page).where(Page.slug == slug)
    if published_only:
        query = query.where(*published_filter())

    result = await db_session.execute(query)
    return result.scalar_one_or_none()


async def require_page(db_session: AsyncSession, page_id: UUID) -> Page:
    """Get a page by ID or raise ``PageNotFoundError``."""
    page = await get_page_by_id(db_session, page_id)
    if page is None:
        raise PageNotFoundError(page_id)
    return page


def _build_blocks(contents: Sequence[Mapping[str, Any]]) -> list[PageContent]:
    blocks = [
        PageContent(
            priority=int(item.get("priority") or 0),
            text=item.get("text"),
            images=list(item.get("images") or []),
        )
        for item in contents
    ]
    # Keep the in-memory collection in the same order the store reads it back
    blocks.sort(key=lambda block: block.priority)
    return blocks


def _stamp(page: Page, actor: UUID | None) -> None:
    if actor is not None:
        page.updated_by = actor


async def _insert_page(
    db_session: AsyncSession,
    fields: dict[str, Any],
    contents: Sequence[Mapping[str, Any]] | None,
    actor: UUID | None,
) -> Page:
    async with transaction(db_session):
        fields["slug"] = await ensure_unique_slug(
            db_session, fields.get("slug"), title=fields["title"]
        )
        fields["meta_data"] = prune_meta_data(fields.get("meta_data"))
        if actor is not None:
            fields["created_by"] = actor
            fields["updated_by"] = actor

        page = Page(**fields, contents=_build_blocks(contents or []))
        db_session.add(page)
        await _flush_claiming_slug(db_session, fields["slug"])

    await db_session.refresh(page)
    logger.info("Created page %r (%s)", page.slug, page.id)
    return page


async def create_page(
    db_session: AsyncSession,
    title: str,
    content: str,
    slug: str | None = None,
    excerpt: str | None = None,
    status: PageStatus = PageStatus.DRAFT,
    template: PageTemplate = PageTemplate.DEFAULT,
    sort_order: int = 0,
    published_at: datetime | None = None,
    meta_data: Mapping[str, Any] | None = None,
    contents: Sequence[Mapping[str, Any]] | None = None,
    actor: UUID | None = None,
) -> Page:
    """Create a new page with its content blocks in a single transaction.

    Args:
        db_session: Database session
        title: Page title
        content: Page body
        slug: Desired slug; derived from the title when empty
        excerpt: Short summary
        status: Initial status (draft by default)
        template: Rendering layout
        sort_order: Display weight (higher numbers first)
        published_at: Publication timestamp
        meta_data: SEO overrides (title/description/keywords); empty values are dropped
        contents: Content blocks as mappings with priority/text/images
        actor: ID of the user performing the change

    Returns:
        Created Page object

    Raises:
        SlugConflictError: If the store rejects the resolved slug
    """
    fields = {
        "title": title,
        "slug": slug,
        "excerpt": excerpt,
        "content": content,
        "status": status,
        "template": template,
        "sort_order": sort_order,
        "published_at": published_at,
        "meta_data": dict(meta_data) if meta_data is not None else None,
    }
    return await _insert_page(db_session, fields, contents, actor)


def _apply_field_updates(page: Page, updates: dict[str, Any]) -> None:
    """Set every field whose value is not the ``_UNSET`` sentinel."""
    for name, value in updates.items():
        if value is not _UNSET:
            setattr(page, name, value)


async def update_page(
    db_session: AsyncSession,
    page_id: UUID,
    title: str = _UNSET,
    slug: str | None = _UNSET,
    excerpt: str | None = _UNSET,
    content: str = _UNSET,
    status: PageStatus = _UNSET,
    template: PageTemplate = _UNSET,
    sort_order: int = _UNSET,
    published_at: datetime | None = _UNSET,
    meta_data: Mapping[str, Any] | None = _UNSET,
    contents: Sequence[Mapping[str, Any]] | None = _UNSET,
    actor: UUID | None = None,
) -> Page:
    """Update an existing page.

    Only arguments that are passed are applied; pass None to clear a nullable
    field. A new slug is re-resolved for uniqueness (ignoring this page's own
    slug). Passing ``contents`` replaces every existing content block.

    Raises:
        PageNotFoundError: If no page has ``page_id``
        SlugConflictError: If the store rejects the resolved slug
    """
    async with transaction(db_session):
        page = await require_page(db_session, page_id)

        if slug is not _UNSET and slug and slug != page.slug:
            slug = await ensure_unique_slug(db_session, slug, exclude_id=page.id)
        else:
            slug = _UNSET

        if meta_data is not _UNSET:
            meta_data = prune_meta_data(dict(meta_data) if meta_data is not None else None)

        _apply_field_updates(page, {
            "title": title,
            "slug": slug,
            "excerpt": excerpt,
            "content": content,
            "status": status,
            "template": template,
            "sort_order": sort_order,
            "published_at": published_at,
            "meta_data": meta_data,
        })
        _stamp(page, actor)

        if contents is not _UNSET and contents is not None:
            # Full replace: delete-orphan cascade removes the old blocks
            page.contents = _build_blocks(contents)

        await _flush_claiming_slug(db_session, page.slug)

    await db_session.refresh(page)
    logger.info("Updated page %r (%s)", page.slug, page.id)
    return page


async def duplicate_page(
    db_session: AsyncSession,
    page_id: UUID,
    actor: UUID | None = None,
) -> Page:
    """Copy a page as a new draft titled "<title> (Copy)" with a fresh slug."""
    source = await require_page(db_session, page_id)

    title = source.title[: MAX_TITLE_LENGTH - len(COPY_SUFFIX)] + COPY_SUFFIX
    fields = {
        "title": title,
        "slug": slugify(title),
        "excerpt": source.excerpt,
        "content": source.content,
        "status": PageStatus.DRAFT,
        "template": source.template,
        "sort_order": source.sort_order,
        "published_at": None,
        "meta_data": dict(source.meta_data) if source.meta_data else None,
        "created_by": source.created_by,
        "updated_by": source.updated_by,
    }
    contents = [
        {"priority": block.priority, "text": block.text, "images": list(block.images or [])}
        for block in source.contents
    ]
    return await _insert_page(db_session, fields, contents, actor)


async def delete_page(
    db_session: AsyncSession,
    page_id: UUID,
) -> None:
    """Delete a page and its content blocks.

    Raises:
        PageNotFoundError: If no page has ``page_id``
    """
    async with transaction(db_session):
        page = await require_page(db_session, page_id)
        await db_session.delete(page)

    logger.info("Deleted page %r (%s)", page.slug, page_id)


async def publish_page(
    db_session: AsyncSession,
    page_id: UUID,
    actor: UUID | None = None,
    at: datetime | None = None,
) -> Page:
    """Mark a page published at ``at`` (now when omitted)."""
    async with transaction(db_session):
        page = await require_page(db_session, page_id)
        page.publish(at)
        _stamp(page, actor)

    await db_session.refresh(page)
    return page


async def unpublish_page(
    db_session: AsyncSession,
    page_id: UUID,
    actor: UUID | None = None,
) -> Page:
    """Return a page to draft. Its published_at is kept."""
    async with transaction(db_session):
        page = await require_page(db_session, page_id)
        page.unpublish()
        _stamp(page, actor)

    await db_session.refresh(page)
    return page


async def archive_page(
    db_session: AsyncSession,
    page_id: UUID,
    actor: UUID | None = None,
) -> Page:
    """Archive a page. Its published_at is kept."""
    async with transaction(db_session):
        page = await require_page(db_session, page_id)
        page.archive()
        _stamp(page, actor)

    await db_session.refresh(page)
    return page


async def bulk_update(
    db_session: AsyncSession,
    ids: Sequence[UUID],
    patch: Mapping[str, Any],
    actor: UUID | None = None,
) -> int:
    """Apply ``patch`` to every page in ``ids`` with one UPDATE statement.

    Returns:
        Number of rows affected

    Raises:
        ValueError: If ``patch`` names a slug or a column outside ``BULK_FIELDS``
    """
    if "slug" in patch:
        raise ValueError("Bulk updates cannot change slugs")
    unknown = set(patch) - BULK_FIELDS
    if unknown:
        raise ValueError(f"Unsupported bulk update fields: {', '.join(sorted(unknown))}")
    if not ids:
        return 0

    values = dict(patch)
    if actor is not None:
        values["updated_by"] = actor

    async with transaction(db_session):
        result = await db_session.execute(
            update(Page)
            .where(Page.id.in_(ids))
            .values(**values)
            .execution_options(synchronize_session="evaluate")
        )
        count = result.rowcount

    logger.info("Bulk updated %d page(s): %s", count, ", ".join(sorted(patch)))
    return count


async def bulk_delete(
    db_session: AsyncSession,
    ids: Sequence[UUID],
) -> int:
    """Delete every page in ``ids`` together with its content blocks.

    Returns:
        Number of pages deleted
    """
    if not ids:
        return 0

    async with transaction(db_session):
        await db_session.execute(
            delete(PageContent)
            .where(PageContent.page_id.in_(ids))
            .execution_options(synchronize_session="evaluate")
        )
        result = await db_session.execute(
            delete(Page)
            .where(Page.id.in_(ids))
            .execution_options(synchronize_session="evaluate")
        )
        count = result.rowcount

    logger.info("Bulk deleted %d page(s)", count)
    return count


async def apply_bulk_action(
    db_session: AsyncSession,
    action: str,
    ids: Sequence[UUID],
    actor: UUID | None = None,
) -> int:
    """Run one of ``BULK_ACTIONS`` across ``ids`` and return the affected count."""
    if action == "delete":
        return await bulk_delete(db_session, ids)
    if action == "publish":
        patch = {"status": PageStatus.PUBLISHED, "published_at": datetime.now(UTC)}
    elif action == "unpublish":
        patch = {"status": PageStatus.DRAFT}
    elif action == "archive":
        patch = {"status": PageStatus.ARCHIVED}
    else:
        raise ValueError(f"Unknown bulk action: {action}")
    return await bulk_update(db_session, ids, patch, actor=actor)


async def get_statistics(db_session: AsyncSession) -> dict[str, int]:
    """Count pages in total and per status."""
    result = await db_session.execute(
        select(Page.status, func.count(Page.id)).group_by(Page.status)
    )
    counts = {str(status): 0 for status in PageStatus}
    for status, count in result.all():
        counts[str(status)] = count
    return {"total": sum(counts.values()), **counts}


def available_templates() -> dict[str, str]:
    return {str(template): label for template, label in TEMPLATE_LABELS.items()}


def available_statuses() -> dict[str, str]:
    return {str(status): label for status, label in STATUS_LABELS.items()}
