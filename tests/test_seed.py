"""Tests for the sample page seeder."""

import pytest

from quire.db.models import PageStatus, PageTemplate
from quire.db.services.page_service import get_page_by_slug, get_statistics
from quire.seed import sample_pages, seed_pages


class TestSamplePages:
    def test_covers_every_template_and_status(self):
        pages = sample_pages()
        assert {page["template"] for page in pages} == set(PageTemplate)
        assert {page["status"] for page in pages} == set(PageStatus)


class TestSeedPages:
    @pytest.mark.asyncio
    async def test_creates_samples(self, db_session):
        created = await seed_pages(db_session)
        assert created == len(sample_pages())

        welcome = await get_page_by_slug(db_session, "welcome", published_only=True)
        assert welcome is not None
        assert welcome.template == PageTemplate.LANDING

    @pytest.mark.asyncio
    async def test_skips_existing_slugs(self, db_session):
        await seed_pages(db_session)
        assert await seed_pages(db_session) == 0
        stats = await get_statistics(db_session)
        assert stats["total"] == len(sample_pages())
