"""Task API tests.

Learn: Tests cover:
1. Task CRUD, owner taken from the token
2. Partial updates (omitted keys untouched, explicit nulls clear)
3. Filters: completed, userId, category, tags; sort by priority
4. Ownership enforcement
"""

import pytest


async def _create_task(client, user, **fields):
    body = {"title": "Do something", **fields}
    r = await client.post("/api/v1/tasks", json=body, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


# ═══════════════════════════════════════════════════════════
# Create / read
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_task(client, alice):
    task = await _create_task(
        client,
        alice,
        title="Write tests",
        description="For the task API",
        dueDate="2030-01-15T09:00:00Z",
        priority=3,
        category="work",
        tags=["urgent", "backend"],
    )
    assert task["title"] == "Write tests"
    assert task["completed"] is False
    assert task["priority"] == 3
    assert task["dueDate"].startswith("2030-01-15T09:00:00")
    assert task["userId"] == alice["id"]
    assert task["user"]["id"] == alice["id"]
    assert task["category"]["name"] == "work"
    assert sorted(t["name"] for t in task["tags"]) == ["backend", "urgent"]


@pytest.mark.asyncio
async def test_create_task_defaults(client, alice):
    task = await _create_task(client, alice)
    assert task["priority"] == 1
    assert task["description"] is None
    assert task["dueDate"] is None
    assert task["category"] is None
    assert task["tags"] == []


@pytest.mark.asyncio
async def test_create_task_ignores_client_owner(client, alice, bob):
    task = await _create_task(client, alice, userId=bob["id"])
    assert task["userId"] == alice["id"]


@pytest.mark.asyncio
async def test_create_task_requires_auth(client):
    r = await client.post("/api/v1/tasks", json={"title": "x"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_create_task_validation(client, alice):
    r = await client.post("/api/v1/tasks", json={"title": ""}, headers=alice["headers"])
    assert r.status_code == 400

    r = await client.post(
        "/api/v1/tasks", json={"title": "x", "priority": "high"}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "priority"


@pytest.mark.asyncio
async def test_get_task(client, alice):
    task = await _create_task(client, alice)
    r = await client.get(f"/api/v1/tasks/{task['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == task["id"]

    r = await client.get("/api/v1/tasks/424242")
    assert r.status_code == 404
    assert r.json()["error"] == "Task not found"


# ═══════════════════════════════════════════════════════════
# List
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_task_filters(client, alice, bob):
    await _create_task(client, alice, title="a1", completed=True, category="home", tags=["x"])
    await _create_task(client, alice, title="a2", tags=["y"])
    await _create_task(client, bob, title="b1", category="home", tags=["x", "y"])

    async def titles(**params):
        r = await client.get("/api/v1/tasks", params={"sortBy": "title", "sortOrder": "asc", **params})
        assert r.status_code == 200
        return [t["title"] for t in r.json()["data"]]

    assert await titles(completed="true") == ["a1"]
    assert await titles(completed="false") == ["a2", "b1"]
    assert await titles(userId=alice["id"]) == ["a1", "a2"]
    assert await titles(category="home") == ["a1", "b1"]
    assert await titles(tags="y") == ["a2", "b1"]
    assert await titles(search="B1") == ["b1"]


@pytest.mark.asyncio
async def test_sort_by_priority(client, alice):
    await _create_task(client, alice, title="low", priority=1)
    await _create_task(client, alice, title="high", priority=5)
    await _create_task(client, alice, title="mid", priority=3)

    r = await client.get("/api/v1/tasks", params={"sortBy": "priority", "sortOrder": "desc"})
    assert [t["title"] for t in r.json()["data"]] == ["high", "mid", "low"]


# ═══════════════════════════════════════════════════════════
# Update / delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_complete_task(client, alice):
    task = await _create_task(client, alice, description="keep")
    r = await client.put(
        f"/api/v1/tasks/{task['id']}", json={"completed": True}, headers=alice["headers"]
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["completed"] is True
    assert updated["description"] == "keep"
    assert updated["title"] == task["title"]


@pytest.mark.asyncio
async def test_update_clears_nullable_fields(client, alice):
    task = await _create_task(client, alice, description="temp", dueDate="2030-01-01T00:00:00Z")
    r = await client.put(
        f"/api/v1/tasks/{task['id']}",
        json={"description": None, "dueDate": None, "title": None},
        headers=alice["headers"],
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["description"] is None
    assert updated["dueDate"] is None
    # title is required; an explicit null leaves it alone
    assert updated["title"] == task["title"]


@pytest.mark.asyncio
async def test_update_task_category_and_tags(client, alice):
    task = await _create_task(client, alice, category="home", tags=["a", "b"])
    r = await client.put(
        f"/api/v1/tasks/{task['id']}",
        json={"category": "work", "tags": ["b", "c"]},
        headers=alice["headers"],
    )
    updated = r.json()["data"]
    assert updated["category"]["name"] == "work"
    assert [t["name"] for t in updated["tags"]] == ["b", "c"]

    r = await client.put(
        f"/api/v1/tasks/{task['id']}", json={"category": None}, headers=alice["headers"]
    )
    updated = r.json()["data"]
    assert updated["category"] is None
    assert [t["name"] for t in updated["tags"]] == ["b", "c"]


@pytest.mark.asyncio
async def test_overlong_tag_is_rejected(client, alice):
    r = await client.post(
        "/api/v1/tasks", json={"title": "t", "tags": ["z" * 101]}, headers=alice["headers"]
    )
    assert r.status_code == 400

    task = await _create_task(client, alice)
    r = await client.put(
        f"/api/v1/tasks/{task['id']}", json={"tags": ["z" * 101]}, headers=alice["headers"]
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_update_task_by_non_owner(client, alice, bob):
    task = await _create_task(client, alice, title="mine")
    r = await client.put(
        f"/api/v1/tasks/{task['id']}", json={"completed": True}, headers=bob["headers"]
    )
    assert r.status_code == 403

    r = await client.get(f"/api/v1/tasks/{task['id']}")
    assert r.json()["data"]["completed"] is False


@pytest.mark.asyncio
async def test_delete_task(client, alice, bob):
    task = await _create_task(client, alice)

    r = await client.delete(f"/api/v1/tasks/{task['id']}", headers=bob["headers"])
    assert r.status_code == 403

    r = await client.delete(f"/api/v1/tasks/{task['id']}", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Task deleted"}

    r = await client.delete(f"/api/v1/tasks/{task['id']}", headers=alice["headers"])
    assert r.status_code == 404
