"""Sample pages covering every template and status."""

import logging
from datetime import datetime, timedelta, UTC
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quire.db.models import Page, PageStatus, PageTemplate
from quire.db.services import page_service

logger = logging.getLogger(__name__)


def sample_pages(now: datetime | None = None) -> list[dict[str, Any]]:
    now = now or datetime.now(UTC)
    return [
        {
            "title": "Welcome to Our Website",
            "slug": "welcome",
            "excerpt": "Discover what makes us special and learn about our mission, values, and commitment to excellence.",
            "content": "Welcome to our website!\n\nWe're thrilled to have you here.",
            "status": PageStatus.PUBLISHED,
            "template": PageTemplate.LANDING,
            "sort_order": 100,
            "published_at": now - timedelta(days=7),
            "meta_data": {
                "title": "Welcome - Your Gateway to Excellence",
                "description": "Discover what makes us special.",
                "keywords": "welcome, mission, values",
            },
        },
        {
            "title": "About Our Company",
            "slug": "about",
            "excerpt": "Learn about our history, our team, and the values that drive everything we do.",
            "content": "Our Story\n\nFounded in 2020, we started with a simple mission.",
            "status": PageStatus.PUBLISHED,
            "template": PageTemplate.DEFAULT,
            "sort_order": 90,
            "published_at": now - timedelta(days=5),
            "meta_data": {"title": "About Us - Our Story and Values"},
        },
        {
            "title": "Getting Started with Dynamic Pages",
            "slug": "getting-started-dynamic-pages",
            "excerpt": "A guide to understanding and using the page system effectively.",
            "content": "Pages are built from a body plus ordered content blocks.",
            "status": PageStatus.PUBLISHED,
            "template": PageTemplate.BLOG,
            "sort_order": 80,
            "published_at": now - timedelta(days=3),
            "contents": [
                {"priority": 1, "text": "Pick a template.", "images": []},
                {"priority": 2, "text": "Add content blocks.", "images": []},
            ],
        },
        {
            "title": "Our Latest Project Portfolio",
            "slug": "latest-project-portfolio",
            "excerpt": "Showcasing our most recent work.",
            "content": "A selection of recent projects.",
            "status": PageStatus.PUBLISHED,
            "template": PageTemplate.PORTFOLIO,
            "sort_order": 70,
            "published_at": now - timedelta(days=1),
        },
        {
            "title": "Contact Us",
            "slug": "contact",
            "excerpt": "Get in touch with our team.",
            "content": "Send us a message and we will get back to you.",
            "status": PageStatus.PUBLISHED,
            "template": PageTemplate.CONTACT,
            "sort_order": 60,
            "published_at": now - timedelta(hours=12),
        },
        {
            "title": "Privacy Policy Draft",
            "slug": "privacy-policy-draft",
            "excerpt": "Our commitment to protecting your privacy and personal information.",
            "content": "This policy is still being written.",
            "status": PageStatus.DRAFT,
            "template": PageTemplate.DEFAULT,
            "sort_order": 50,
        },
        {
            "title": "Legacy Content Archive",
            "slug": "legacy-content-archive",
            "excerpt": "Historical content preserved for reference.",
            "content": "This content is no longer actively maintained.",
            "status": PageStatus.ARCHIVED,
            "template": PageTemplate.DEFAULT,
            "sort_order": 10,
            "published_at": now - timedelta(days=180),
        },
    ]


async def seed_pages(db_session: AsyncSession) -> int:
    """Insert the sample pages whose slugs are not taken yet.

    Returns:
        Number of pages created
    """
    pages = sample_pages()
    result = await db_session.execute(
        select(Page.slug).where(Page.slug.in_([page["slug"] for page in pages]))
    )
    existing = set(result.scalars().all())

    created = 0
    for data in pages:
        if data["slug"] in existing:
            logger.info("Skipping existing page %r", data["slug"])
            continue
        await page_service.create_page(db_session, **data)
        created += 1
    return created
