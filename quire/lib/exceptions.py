"""Domain errors and the Litestar exception handlers that expose them."""

import logging
from uuid import UUID

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

logger = logging.getLogger(__name__)


class QuireError(Exception):
    """Base class for errors raised by the page services."""


class PageNotFoundError(QuireError):
    """An operation referenced a page id or slug that does not exist."""

    def __init__(self, page_id: UUID | str):
        self.page_id = page_id
        super().__init__(f"Page {page_id} not found")


class SlugConflictError(QuireError):
    """The store rejected a slug because another page already claims it."""

    def __init__(self, slug: str | None = None):
        self.slug = slug
        message = f"Slug '{slug}' is already in use" if slug else "Slug is already in use"
        super().__init__(message)


def _json_error(status_code: int, detail: str) -> Response:
    return Response(
        content={"status_code": status_code, "detail": detail},
        status_code=status_code,
        media_type="application/json",
    )


def page_not_found_handler(request: Request, exc: PageNotFoundError) -> Response:
    return _json_error(HTTP_404_NOT_FOUND, str(exc))


def slug_conflict_handler(request: Request, exc: SlugConflictError) -> Response:
    return _json_error(HTTP_409_CONFLICT, str(exc))


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render Litestar HTTP exceptions (validation errors included) as JSON."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    response = _json_error(exc.status_code, detail)
    extra = getattr(exc, "extra", None)
    if extra:
        response.content["extra"] = extra
    return response


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected failures and answer with a generic message."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _json_error(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


EXCEPTION_HANDLERS = {
    PageNotFoundError: page_not_found_handler,
    SlugConflictError: slug_conflict_handler,
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}
