"""Tests for the pagination helper."""

import pytest

from quire.lib.pagination import Paginated, paginate


class TestPaginated:
    @pytest.mark.parametrize(
        "total, per_page, expected",
        [(0, 15, 1), (1, 15, 1), (15, 15, 1), (16, 15, 2), (100, 12, 9)],
    )
    def test_last_page(self, total, per_page, expected):
        assert Paginated(total=total, per_page=per_page).last_page == expected

    def test_has_more(self):
        assert Paginated(page=1, per_page=10, total=11).has_more
        assert not Paginated(page=2, per_page=10, total=11).has_more


class TestPaginate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("page, per_page", [(0, 10), (1, 0), (-1, 5)])
    async def test_rejects_values_below_one(self, db_session, page, per_page):
        from sqlalchemy import select

        from quire.db.models import Page

        with pytest.raises(ValueError):
            await paginate(db_session, select(Page), page=page, per_page=per_page)
