"""User API tests — public profiles, self-only edits, no password leaks."""

import pytest


@pytest.mark.asyncio
async def test_list_users(client, alice, bob):
    r = await client.get("/api/v1/users")
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total"] == 2
    for user in body["data"]:
        assert set(user) == {"id", "email", "name", "createdAt"}


@pytest.mark.asyncio
async def test_search_users(client, alice, bob):
    r = await client.get("/api/v1/users", params={"search": "smith"})
    assert [u["email"] for u in r.json()["data"]] == ["bob@example.com"]

    r = await client.get("/api/v1/users", params={"search": "alice@"})
    assert [u["email"] for u in r.json()["data"]] == ["alice@example.com"]


@pytest.mark.asyncio
async def test_get_user_with_posts_and_comments(client, alice):
    r = await client.post(
        "/api/v1/posts", json={"title": "T", "content": "C"}, headers=alice["headers"]
    )
    post_id = r.json()["data"]["id"]
    await client.post(
        "/api/v1/comments", json={"postId": post_id, "content": "self"}, headers=alice["headers"]
    )

    r = await client.get(f"/api/v1/users/{alice['id']}")
    assert r.status_code == 200
    user = r.json()["data"]
    assert "password" not in user
    assert "passwordHash" not in user
    assert [p["id"] for p in user["posts"]] == [post_id]
    assert user["comments"][0]["postId"] == post_id


@pytest.mark.asyncio
async def test_get_user_not_found(client):
    r = await client.get("/api/v1/users/31337")
    assert r.status_code == 404
    assert r.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_update_self(client, alice):
    r = await client.put(
        f"/api/v1/users/{alice['id']}",
        json={"name": "Alice J.", "password": "new_password_1"},
        headers=alice["headers"],
    )
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Alice J."

    # New password works, old one does not
    r = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "new_password_1"}
    )
    assert r.status_code == 200
    r = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "password123"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_update_other_user_is_forbidden(client, alice, bob):
    r = await client.put(
        f"/api/v1/users/{bob['id']}", json={"name": "pwned"}, headers=alice["headers"]
    )
    assert r.status_code == 403

    r = await client.get(f"/api/v1/users/{bob['id']}")
    assert r.json()["data"]["name"] == "Bob Smith"


@pytest.mark.asyncio
async def test_update_email_to_taken_address(client, alice, bob):
    r = await client.put(
        f"/api/v1/users/{alice['id']}",
        json={"email": "bob@example.com"},
        headers=alice["headers"],
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_update_email_too_long(client, alice):
    r = await client.put(
        f"/api/v1/users/{alice['id']}",
        json={"email": "b" * 250 + "@x.com"},
        headers=alice["headers"],
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


@pytest.mark.asyncio
async def test_delete_self_removes_owned_records(client, alice, bob):
    r = await client.post(
        "/api/v1/posts", json={"title": "T", "content": "C"}, headers=alice["headers"]
    )
    post_id = r.json()["data"]["id"]
    await client.post(
        "/api/v1/comments", json={"postId": post_id, "content": "bob was here"}, headers=bob["headers"]
    )
    await client.post("/api/v1/tasks", json={"title": "todo"}, headers=alice["headers"])

    r = await client.delete(f"/api/v1/users/{bob['id']}", headers=alice["headers"])
    assert r.status_code == 403

    r = await client.delete(f"/api/v1/users/{alice['id']}", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["message"] == "User deleted"
    client.cookies.clear()

    assert (await client.get(f"/api/v1/users/{alice['id']}")).status_code == 404
    assert (await client.get(f"/api/v1/posts/{post_id}")).status_code == 404
    assert (await client.get("/api/v1/tasks")).json()["pagination"]["total"] == 0
    assert (await client.get("/api/v1/comments")).json()["pagination"]["total"] == 0
