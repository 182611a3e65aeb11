"""HTTP tests for posts, categories and comments."""

import pytest

from conftest import login

from neuroblog.config import get_settings


def register(client, username):
    r = client.post("/auth/register", json={"username": username, "email": f"{username}@example.com", "password": "secret1"})
    assert r.status_code == 200, r.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['token']}"}, r.json()["user"]["id"]


@pytest.fixture
def alice(client):
    return register(client, "alice")


@pytest.fixture
def bob(client):
    return register(client, "bob")


@pytest.fixture
def admin(client):
    sp = get_settings().system_principal
    return login(client, sp.username, sp.password)


def new_post(client, headers, **kw):
    payload = {"title": "Hello", "body": "Body text", "tags": ["JS", "Machine Learning"], "status": "published"}
    payload.update(kw)
    r = client.post("/posts", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


class TestPosts:
    def test_create_normalizes_tags(self, client, alice):
        headers, _ = alice
        post = new_post(client, headers)
        assert post["tags"] == ["javascript", "ai"]
        assert post["publish_date"]

    def test_create_requires_auth(self, client):
        assert client.post("/posts", json={"title": "x", "body": "y"}).status_code == 401

    def test_drafts_hidden_from_others(self, client, alice, bob, admin):
        headers, _ = alice
        draft = new_post(client, headers, status="draft")

        assert client.get(f"/posts/{draft['id']}").status_code == 404
        assert client.get(f"/posts/{draft['id']}", headers=bob[0]).status_code == 404
        assert client.get(f"/posts/{draft['id']}", headers=headers).status_code == 200
        assert client.get(f"/posts/{draft['id']}", headers=admin).status_code == 200

    def test_list_status_rules(self, client, alice):
        headers, alice_id = alice
        new_post(client, headers, title="Live")
        new_post(client, headers, title="Hidden", status="draft")

        public = client.get("/posts").json()
        assert [p["title"] for p in public["posts"]] == ["Live"]
        assert public["total"] == 1

        mine = client.get("/posts", params={"author": alice_id, "status": "all"}, headers=headers).json()
        assert {p["title"] for p in mine["posts"]} == {"Live", "Hidden"}

        sneaky = client.get("/posts", params={"status": "all"}).json()
        assert [p["title"] for p in sneaky["posts"]] == ["Live"]

    def test_pagination_and_sort(self, client, alice):
        headers, _ = alice
        for i in range(3):
            new_post(client, headers, title=f"P{i}")
        page = client.get("/posts", params={"limit": 2, "page": 1, "sortBy": "oldest"}).json()
        assert page["total"] == 3
        assert page["pages"] == 2
        assert len(page["posts"]) == 2

    def test_tag_filter(self, client, alice):
        headers, _ = alice
        new_post(client, headers, title="Tagged", tags=["python"])
        new_post(client, headers, title="Other", tags=["rust"])
        got = client.get("/posts", params={"tags": "py"}).json()
        assert [p["title"] for p in got["posts"]] == ["Tagged"]

    def test_search_and_popular_tags(self, client, alice):
        headers, _ = alice
        new_post(client, headers, title="Rust ownership explained", tags=["rust"])
        new_post(client, headers, title="Python tips", tags=["python", "rust"])
        assert [p["title"] for p in client.get("/posts/search/ownership").json()] == ["Rust ownership explained"]
        assert client.get("/posts/popular-tags").json()[0] == "rust"

    def test_only_author_or_admin_edits(self, client, alice, bob, admin):
        post = new_post(client, alice[0])
        assert client.put(f"/posts/{post['id']}", json={"title": "Nope"}, headers=bob[0]).status_code == 403
        r = client.put(f"/posts/{post['id']}", json={"title": "Edited", "tags": ["ML"]}, headers=alice[0])
        assert r.json()["title"] == "Edited"
        assert r.json()["tags"] == ["ai"]
        assert client.delete(f"/posts/{post['id']}", headers=bob[0]).status_code == 403
        assert client.delete(f"/posts/{post['id']}", headers=admin).status_code == 200
        assert client.get(f"/posts/{post['id']}").status_code == 404

    def test_reactions_one_per_user(self, client, alice, bob):
        post = new_post(client, alice[0])
        url = f"/posts/{post['id']}/react"

        assert len(client.post(url, json={"emoji": "🔥"}, headers=bob[0]).json()) == 1
        changed = client.post(url, json={"emoji": "👍"}, headers=bob[0]).json()
        assert [r["emoji"] for r in changed] == ["👍"]
        assert client.post(url, json={"emoji": "👍"}, headers=bob[0]).json() == []

        client.post(url, json={"emoji": "👍"}, headers=alice[0])
        client.post(url, json={"emoji": "🔥"}, headers=bob[0])
        assert len(client.get(f"/posts/{post['id']}").json()["reactions"]) == 2


class TestCategories:
    def test_admin_crud(self, client, admin, alice):
        assert client.post("/categories", json={"name": "Tech"}, headers=alice[0]).status_code == 403

        parent = client.post("/categories", json={"name": "Tech"}, headers=admin).json()
        assert client.post("/categories", json={"name": "Tech"}, headers=admin).status_code == 400

        child = client.post("/categories", json={"name": "AI", "parent_id": parent["id"]}, headers=admin)
        assert child.status_code == 201
        assert child.json()["parent_id"] == parent["id"]

        r = client.put(f"/categories/{parent['id']}", json={"parent_id": parent["id"]}, headers=admin)
        assert r.status_code == 400

        assert client.delete(f"/categories/{parent['id']}", headers=admin).status_code == 400
        assert client.delete(f"/categories/{child.json()['id']}", headers=admin).status_code == 200
        assert client.delete(f"/categories/{parent['id']}", headers=admin).status_code == 200
        assert client.get("/categories").json() == []

    def test_missing_parent(self, client, admin):
        r = client.post("/categories", json={"name": "Orphan", "parent_id": "6f1c2f46-2b36-4a1b-9d55-2bb6d6e1f3a1"}, headers=admin)
        assert r.status_code == 404


class TestComments:
    def test_thread_and_permissions(self, client, alice, bob):
        post = new_post(client, alice[0])

        top = client.post("/comments", json={"content": "First!", "post_id": post["id"]}, headers=bob[0]).json()
        reply = client.post(
            "/comments", json={"content": "Thanks", "post_id": post["id"], "parent_id": top["id"]}, headers=alice[0]
        )
        assert reply.status_code == 201

        thread = client.get(f"/comments/post/{post['id']}").json()
        assert len(thread) == 1
        assert [r["content"] for r in thread[0]["replies"]] == ["Thanks"]

        assert client.put(f"/comments/{top['id']}", json={"content": "hijack"}, headers=alice[0]).status_code == 403
        assert client.put(f"/comments/{top['id']}", json={"content": "Edited"}, headers=bob[0]).json()["content"] == "Edited"

        assert client.post(f"/comments/{top['id']}/upvote", headers=alice[0]).json() == {"upvotes": 1}

        assert client.delete(f"/comments/{top['id']}", headers=bob[0]).status_code == 200
        assert client.get(f"/comments/post/{post['id']}").json() == []

    def test_comment_on_missing_post(self, client, alice):
        r = client.post("/comments", json={"content": "x", "post_id": "6f1c2f46-2b36-4a1b-9d55-2bb6d6e1f3a1"}, headers=alice[0])
        assert r.status_code == 404
