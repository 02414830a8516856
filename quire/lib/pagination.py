"""Offset pagination over SQLAlchemy select statements."""

from dataclasses import dataclass, field
from math import ceil
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass
class Paginated(Generic[T]):
    """One page of results plus the numbers needed to render a pager.

    Page numbers are 1-indexed. ``last_page`` is never below 1, so an empty
    result set still reports a single (empty) page.
    """

    items: list[T] = field(default_factory=list)
    page: int = 1
    per_page: int = 15
    total: int = 0

    @property
    def last_page(self) -> int:
        return max(1, ceil(self.total / self.per_page))

    @property
    def has_more(self) -> bool:
        return self.page < self.last_page


async def paginate(
    db_session: AsyncSession,
    query: Select,
    page: int = 1,
    per_page: int = 15,
) -> Paginated:
    """Execute ``query`` for the requested page and count all matching rows.

    Requesting a page past the end returns an empty ``items`` list.

    Raises:
        ValueError: If ``page`` or ``per_page`` is below 1.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if per_page < 1:
        raise ValueError("per_page must be >= 1")

    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db_session.execute(count_query)).scalar_one()

    result = await db_session.execute(query.limit(per_page).offset((page - 1) * per_page))
    return Paginated(
        items=list(result.scalars().all()),
        page=page,
        per_page=per_page,
        total=total,
    )
