"""HTTP tests for the admin and public page endpoints."""

from datetime import datetime, timedelta, UTC
from uuid import uuid4

import pytest
from litestar.testing import TestClient

from quire.asgi import create_app
from quire.config import DatabaseConfig, PaginationConfig, Settings


@pytest.fixture
def client(db_url):
    settings = Settings(
        db=DatabaseConfig(url=db_url, create_all=True),
        pagination=PaginationConfig(admin_per_page=15, public_per_page=2, max_per_page=3),
    )
    with TestClient(app=create_app(settings)) as client:
        yield client


def create(client, **fields):
    payload = {"title": "Untitled", "content": "Body", **fields}
    response = client.post("/admin/pages", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestAdminCreate:
    def test_create_returns_page(self, client):
        actor = uuid4()
        response = client.post(
            "/admin/pages",
            json={
                "title": "Hello, World!",
                "content": "Body",
                "template": "blog",
                "meta_data": {"title": "Hi", "description": ""},
                "contents": [{"priority": 2, "text": "b"}, {"priority": 1, "text": "a"}],
            },
            headers={"X-Actor-Id": str(actor)},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "hello-world"
        assert body["status"] == "draft"
        assert body["template"] == "blog"
        assert body["meta_data"] == {"title": "Hi"}
        assert body["meta_title"] == "Hi"
        assert body["created_by"] == str(actor)
        assert [block["text"] for block in body["contents"]] == ["a", "b"]

    def test_duplicate_titles_get_counters(self, client):
        assert create(client, title="About")["slug"] == "about"
        assert create(client, title="About")["slug"] == "about-1"

    def test_validation_errors(self, client):
        assert client.post("/admin/pages", json={"content": "no title"}).status_code == 400
        assert client.post("/admin/pages", json={"title": "T", "content": "x", "status": "live"}).status_code == 400
        assert client.post("/admin/pages", json={"title": "T", "content": "x", "sort_order": -1}).status_code == 400

    def test_invalid_actor_header(self, client):
        response = client.post("/admin/pages", json={"title": "T", "content": "x"}, headers={"X-Actor-Id": "bob"})
        assert response.status_code == 400

    def test_naive_published_at_is_utc(self, client):
        page = create(client, title="Dated", status="published", published_at="2024-01-02T03:04:05")
        assert datetime.fromisoformat(page["published_at"]) == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestAdminUpdate:
    def test_partial_update(self, client):
        page = create(client, title="About", excerpt="Keep me")
        response = client.put(f"/admin/pages/{page['id']}", json={"title": "About Us"})
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "About Us"
        assert body["slug"] == "about"
        assert body["excerpt"] == "Keep me"

    def test_null_title_rejected(self, client):
        page = create(client, title="About")
        response = client.put(f"/admin/pages/{page['id']}", json={"title": None})
        assert response.status_code == 400

    def test_explicit_null_clears_excerpt(self, client):
        page = create(client, title="About", excerpt="Summary")
        response = client.put(f"/admin/pages/{page['id']}", json={"excerpt": None})
        assert response.json()["excerpt"] is None

    def test_missing_page(self, client):
        response = client.put(f"/admin/pages/{uuid4()}", json={"title": "x"})
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]


class TestAdminLifecycle:
    def test_publish_unpublish_archive(self, client):
        page = create(client, title="Flow")

        published = client.post(f"/admin/pages/{page['id']}/publish").json()
        assert published["status"] == "published"
        assert published["published_at"] is not None
        assert published["is_effectively_published"] is True

        unpublished = client.post(f"/admin/pages/{page['id']}/unpublish").json()
        assert unpublished["status"] == "draft"
        assert unpublished["published_at"] == published["published_at"]

        archived = client.post(f"/admin/pages/{page['id']}/archive").json()
        assert archived["status"] == "archived"

    def test_duplicate(self, client):
        page = create(client, title="Pricing", status="published", contents=[{"priority": 0, "text": "tier"}])
        response = client.post(f"/admin/pages/{page['id']}/duplicate")
        assert response.status_code == 201
        copy = response.json()
        assert copy["title"] == "Pricing (Copy)"
        assert copy["slug"] == "pricing-copy"
        assert copy["status"] == "draft"
        assert [block["text"] for block in copy["contents"]] == ["tier"]

    def test_delete(self, client):
        page = create(client, title="Gone")
        assert client.delete(f"/admin/pages/{page['id']}").status_code == 204
        assert client.get(f"/admin/pages/{page['id']}").status_code == 404
        assert client.delete(f"/admin/pages/{page['id']}").status_code == 404


class TestAdminIndex:
    def test_lists_with_statistics_and_filters(self, client):
        create(client, title="Alpha", status="published")
        create(client, title="Beta")
        create(client, title="Gamma", status="archived", template="contact")

        body = client.get("/admin/pages", params={"status": "draft"}).json()
        assert [page["title"] for page in body["pages"]["items"]] == ["Beta"]
        assert body["statistics"] == {"total": 3, "draft": 1, "published": 1, "archived": 1}
        assert {page["title"] for page in body["recent"]} == {"Alpha", "Beta", "Gamma"}
        assert body["filters"] == {"status": "draft", "page": 1}
        assert body["statuses"]["archived"] == "Archived"
        assert body["templates"]["contact"] == "Contact Page"

        searched = client.get("/admin/pages", params={"search": "amm", "template": "contact"}).json()
        assert [page["title"] for page in searched["pages"]["items"]] == ["Gamma"]

    def test_per_page_is_capped(self, client):
        for i in range(5):
            create(client, title=f"Page {i}")
        body = client.get("/admin/pages", params={"per_page": 50}).json()
        assert body["pages"]["per_page"] == 3
        assert len(body["pages"]["items"]) == 3
        assert body["pages"]["last_page"] == 2

    def test_rejects_page_zero(self, client):
        assert client.get("/admin/pages", params={"page": 0}).status_code == 400


class TestAdminBulk:
    def test_bulk_publish_then_delete(self, client):
        ids = [create(client, title=f"Bulk {i}")["id"] for i in range(3)]

        response = client.post("/admin/pages/bulk", json={"action": "publish", "ids": ids[:2]})
        assert response.status_code == 200
        assert response.json() == {"action": "publish", "count": 2}
        assert client.get("/admin/pages").json()["statistics"]["published"] == 2

        response = client.post("/admin/pages/bulk", json={"action": "delete", "ids": ids})
        assert response.json() == {"action": "delete", "count": 3}
        assert client.get("/admin/pages").json()["statistics"]["total"] == 0

    def test_rejects_unknown_action_and_empty_ids(self, client):
        page_id = create(client)["id"]
        assert client.post("/admin/pages/bulk", json={"action": "explode", "ids": [page_id]}).status_code == 400
        assert client.post("/admin/pages/bulk", json={"action": "publish", "ids": []}).status_code == 400


class TestPublicPages:
    def test_only_effectively_published_pages(self, client):
        future = (datetime.now(UTC) + timedelta(days=1)).isoformat()
        create(client, title="Live", status="published")
        create(client, title="Scheduled", status="published", published_at=future)
        create(client, title="Draft")

        body = client.get("/pages").json()
        assert [page["title"] for page in body["items"]] == ["Live"]
        assert body["total"] == 1

        assert client.get("/pages/live").status_code == 200
        assert client.get("/pages/scheduled").status_code == 404
        assert client.get("/pages/draft").status_code == 404
        assert client.get("/pages/missing").status_code == 404

    def test_public_page_size(self, client):
        for i in range(3):
            create(client, title=f"Public {i}", status="published", sort_order=i)
        body = client.get("/pages").json()
        assert body["per_page"] == 2
        assert [page["title"] for page in body["items"]] == ["Public 2", "Public 1"]
        assert body["last_page"] == 2

    def test_show_includes_template(self, client):
        create(client, title="Landing", status="published", template="landing")
        assert client.get("/pages/landing").json()["template"] == "landing"
