"""
Postboard - Post Route Tests

Run with: pytest tests/test_posts.py
"""

from tests.conftest import login_user


class TestPostRoutes:
    """Integration tests for /posts."""

    def _create(self, client, title: str) -> dict:
        response = client.post("/api/v1/posts", json={"title": title})
        assert response.status_code == 200
        return response.json()

    def test_create_requires_login(self, client):
        response = client.post("/api/v1/posts", json={"title": "hello"})

        assert response.status_code == 401

    def test_create_and_list(self, client, alice):
        login_user(client, "alice", "secret1")

        first = self._create(client, "first")
        second = self._create(client, "second")

        posts = client.get("/api/v1/posts").json()
        assert [p["id"] for p in posts] == [first["id"], second["id"]]
        assert client.get(f"/api/v1/posts/{first['id']}").json()["title"] == "first"

    def test_get_missing_post(self, client):
        response = client.get("/api/v1/posts/42")

        assert response.status_code == 200
        assert response.json() is None

    def test_update_title(self, client, alice):
        login_user(client, "alice", "secret1")
        post = self._create(client, "draft")

        updated = client.patch(f"/api/v1/posts/{post['id']}", json={"title": "final"}).json()

        assert updated["title"] == "final"

    def test_update_without_title_keeps_post(self, client, alice):
        login_user(client, "alice", "secret1")
        post = self._create(client, "draft")

        updated = client.patch(f"/api/v1/posts/{post['id']}", json={}).json()

        assert updated["title"] == "draft"

    def test_update_missing_post(self, client):
        assert client.patch("/api/v1/posts/42", json={"title": "x"}).json() is None

    def test_delete(self, client, alice):
        login_user(client, "alice", "secret1")
        post = self._create(client, "gone")

        assert client.delete(f"/api/v1/posts/{post['id']}").json() is True
        assert client.get(f"/api/v1/posts/{post['id']}").json() is None
