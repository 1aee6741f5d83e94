"""
tests/test_api_content.py -- Integration tests for author and post routes.

Coverage:
  - writes without a bearer token are rejected before any side effect
  - author create / list / update / soft delete; 404 after delete
  - post create with author, nested author in GET /posts
  - authorId pointing at a missing author is a 400
  - partial overwrite semantics of PUT
  - camelCase JSON field names

Fixtures used (from conftest.py):
  - api_client: ApiContext with a valid bearer token in .headers
"""

from __future__ import annotations

from conftest import ApiContext


def _create_author(ctx: ApiContext, **body) -> dict:
    body.setdefault("name", "Ursula K. Le Guin")
    resp = ctx.client.post("/api/authors", json=body, headers=ctx.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_post(ctx: ApiContext, **body) -> dict:
    body.setdefault("title", "A Wizard of Earthsea")
    resp = ctx.client.post("/api/posts", json=body, headers=ctx.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestWritesRequireToken:
    def test_create_author_unauthenticated(self, api_client: ApiContext) -> None:
        before = len(api_client.client.get("/api/authors").json())
        resp = api_client.client.post("/api/authors", json={"name": "No Auth"})
        assert resp.status_code == 401
        assert len(api_client.client.get("/api/authors").json()) == before

    def test_update_author_unauthenticated(self, api_client: ApiContext) -> None:
        author = _create_author(api_client)
        resp = api_client.client.put(f"/api/authors/{author['id']}", json={"name": "Hijacked"})
        assert resp.status_code == 401
        names = [a["name"] for a in api_client.client.get("/api/authors").json()]
        assert "Hijacked" not in names

    def test_delete_post_unauthenticated(self, api_client: ApiContext) -> None:
        post = _create_post(api_client)
        resp = api_client.client.delete(f"/api/posts/{post['id']}")
        assert resp.status_code == 401
        assert api_client.content.get_post(post["id"]) is not None

    def test_invalid_token_on_write(self, api_client: ApiContext) -> None:
        resp = api_client.client.post(
            "/api/posts", json={"title": "x"}, headers={"Authorization": "Bearer not-a-token"}
        )
        assert resp.status_code == 401


class TestAuthors:
    def test_list_is_public(self, api_client: ApiContext) -> None:
        resp = api_client.client.get("/api/authors")
        assert resp.status_code == 200
        assert isinstance(resp.json(), list)

    def test_create_author(self, api_client: ApiContext) -> None:
        data = _create_author(api_client, name="Octavia Butler", bio="Kindred", birthdate="1947-06-22")
        assert isinstance(data["id"], int)
        assert data["name"] == "Octavia Butler"
        assert data["bio"] == "Kindred"
        assert data["birthdate"] == "1947-06-22"
        assert "createdAt" in data
        assert "updatedAt" in data

    def test_create_author_without_name_is_400(self, api_client: ApiContext) -> None:
        resp = api_client.client.post("/api/authors", json={"bio": "nameless"}, headers=api_client.headers)
        assert resp.status_code == 400

    def test_create_author_bad_birthdate_is_400(self, api_client: ApiContext) -> None:
        resp = api_client.client.post(
            "/api/authors", json={"name": "X", "birthdate": "not-a-date"}, headers=api_client.headers
        )
        assert resp.status_code == 400

    def test_update_author_overwrites_supplied_fields(self, api_client: ApiContext) -> None:
        author = _create_author(api_client, name="Before", bio="keep me")
        resp = api_client.client.put(f"/api/authors/{author['id']}", json={"name": "After"}, headers=api_client.headers)
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["name"] == "After"
        assert data["bio"] == "keep me"

    def test_update_author_null_name_is_400(self, api_client: ApiContext) -> None:
        author = _create_author(api_client)
        resp = api_client.client.put(f"/api/authors/{author['id']}", json={"name": None}, headers=api_client.headers)
        assert resp.status_code == 400

    def test_update_missing_author_is_404(self, api_client: ApiContext) -> None:
        resp = api_client.client.put("/api/authors/999999", json={"name": "x"}, headers=api_client.headers)
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"

    def test_soft_delete_author(self, api_client: ApiContext) -> None:
        author = _create_author(api_client, name="Soon Gone")
        resp = api_client.client.delete(f"/api/authors/{author['id']}", headers=api_client.headers)
        assert resp.status_code == 200
        assert resp.json()["message"]

        ids = [a["id"] for a in api_client.client.get("/api/authors").json()]
        assert author["id"] not in ids

        again = api_client.client.put(f"/api/authors/{author['id']}", json={"name": "x"}, headers=api_client.headers)
        assert again.status_code == 404
        second_delete = api_client.client.delete(f"/api/authors/{author['id']}", headers=api_client.headers)
        assert second_delete.status_code == 404

        # Soft delete only: the row is still there.
        assert api_client.content.get_author(author["id"], include_deleted=True) is not None


class TestPosts:
    def test_create_post_and_list_with_author(self, api_client: ApiContext) -> None:
        author = _create_author(api_client, name="Joined Author")
        post = _create_post(api_client, title="Joined", content="body", authorId=author["id"])
        assert post["authorId"] == author["id"]

        listing = api_client.client.get("/api/posts")
        assert listing.status_code == 200
        row = next(p for p in listing.json() if p["id"] == post["id"])
        assert row["author"] is not None
        assert row["author"]["id"] == author["id"]
        assert row["author"]["name"] == "Joined Author"

    def test_snake_case_author_id_is_accepted(self, api_client: ApiContext) -> None:
        author = _create_author(api_client)
        post = _create_post(api_client, title="snake", author_id=author["id"])
        assert post["authorId"] == author["id"]

    def test_post_without_author(self, api_client: ApiContext) -> None:
        post = _create_post(api_client, title="Anonymous")
        row = next(p for p in api_client.client.get("/api/posts").json() if p["id"] == post["id"])
        assert row["authorId"] is None
        assert row["author"] is None

    def test_create_post_with_missing_author_is_400(self, api_client: ApiContext) -> None:
        resp = api_client.client.post(
            "/api/posts", json={"title": "x", "authorId": 999999}, headers=api_client.headers
        )
        assert resp.status_code == 400

    def test_post_of_deleted_author_lists_without_author(self, api_client: ApiContext) -> None:
        author = _create_author(api_client)
        post = _create_post(api_client, title="Outlives author", authorId=author["id"])
        api_client.client.delete(f"/api/authors/{author['id']}", headers=api_client.headers)
        row = next(p for p in api_client.client.get("/api/posts").json() if p["id"] == post["id"])
        assert row["authorId"] == author["id"]
        assert row["author"] is None

    def test_update_post(self, api_client: ApiContext) -> None:
        post = _create_post(api_client, title="Draft", content="keep")
        resp = api_client.client.put(f"/api/posts/{post['id']}", json={"title": "Final"}, headers=api_client.headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["title"] == "Final"
        assert resp.json()["content"] == "keep"

    def test_update_post_to_missing_author_is_400(self, api_client: ApiContext) -> None:
        post = _create_post(api_client)
        resp = api_client.client.put(
            f"/api/posts/{post['id']}", json={"authorId": 999999}, headers=api_client.headers
        )
        assert resp.status_code == 400

    def test_update_missing_post_is_404(self, api_client: ApiContext) -> None:
        resp = api_client.client.put("/api/posts/999999", json={"title": "x"}, headers=api_client.headers)
        assert resp.status_code == 404

    def test_soft_delete_post(self, api_client: ApiContext) -> None:
        post = _create_post(api_client, title="Ephemeral")
        resp = api_client.client.delete(f"/api/posts/{post['id']}", headers=api_client.headers)
        assert resp.status_code == 200
        ids = [p["id"] for p in api_client.client.get("/api/posts").json()]
        assert post["id"] not in ids
        again = api_client.client.put(f"/api/posts/{post['id']}", json={"title": "x"}, headers=api_client.headers)
        assert again.status_code == 404
