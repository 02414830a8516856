"""Tests for the JSON exception handlers."""

import logging
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from litestar.exceptions import NotFoundException, ValidationException

from quire.lib.exceptions import (
    PageNotFoundError,
    SlugConflictError,
    http_exception_handler,
    internal_server_error_handler,
    page_not_found_handler,
    slug_conflict_handler,
)


@pytest.fixture
def fake_request():
    """Create a minimal mock request for the error handlers."""
    request = MagicMock()
    request.method = "GET"
    request.url.path = "/test"
    return request


class TestDomainErrors:
    def test_page_not_found(self, fake_request):
        page_id = uuid4()
        response = page_not_found_handler(fake_request, PageNotFoundError(page_id))
        assert response.status_code == 404
        assert response.content == {"status_code": 404, "detail": f"Page {page_id} not found"}

    def test_slug_conflict(self, fake_request):
        response = slug_conflict_handler(fake_request, SlugConflictError("about"))
        assert response.status_code == 409
        assert response.content["detail"] == "Slug 'about' is already in use"

    def test_slug_conflict_without_slug(self):
        assert str(SlugConflictError()) == "Slug is already in use"


class TestHttpExceptionHandler:
    def test_passes_status_through(self, fake_request):
        response = http_exception_handler(fake_request, NotFoundException("Page 'x' not found"))
        assert response.status_code == 404
        assert response.content["detail"] == "Page 'x' not found"

    def test_includes_validation_extra(self, fake_request):
        exc = ValidationException("Validation failed", extra=[{"key": "title"}])
        response = http_exception_handler(fake_request, exc)
        assert response.status_code == 400
        assert response.content["extra"] == [{"key": "title"}]


class TestInternalServerErrorHandler:
    """Test that internal_server_error_handler logs exceptions."""

    def test_logs_and_hides_details(self, fake_request, caplog):
        exc = RuntimeError("boom")
        with caplog.at_level(logging.ERROR, logger="quire.lib.exceptions"):
            try:
                raise exc
            except RuntimeError:
                response = internal_server_error_handler(fake_request, exc)

        assert response.status_code == 500
        assert response.content["detail"] == "Internal Server Error"
        assert "boom" not in str(response.content)
        assert "Unhandled exception on GET /test" in caplog.text
