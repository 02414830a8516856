"""Shared helpers for the page controllers."""

from uuid import UUID

from litestar import Request
from litestar.datastructures import State
from litestar.exceptions import ValidationException

from quire.config import Settings

ACTOR_HEADER = "X-Actor-Id"


async def provide_actor(request: Request) -> UUID | None:
    """Read the acting identity set by whatever authenticates the request."""
    raw = request.headers.get(ACTOR_HEADER)
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        raise ValidationException(f"Invalid {ACTOR_HEADER} header: {raw!r}")


def clamp_per_page(state: State, per_page: int | None, public: bool = False) -> int:
    """Apply the configured default and ceiling to a requested page size."""
    settings: Settings = state.settings
    if per_page is None:
        per_page = settings.pagination.public_per_page if public else settings.pagination.admin_per_page
    return min(per_page, settings.pagination.max_per_page)
