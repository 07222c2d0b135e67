"""Category and tag API tests — upsert by unique name."""

import pytest


@pytest.mark.asyncio
@pytest.mark.parametrize("resource", ["categories", "tags"])
async def test_create_is_idempotent(client, alice, resource):
    r1 = await client.post(f"/api/v1/{resource}", json={"name": "python"}, headers=alice["headers"])
    assert r1.status_code == 201
    assert r1.json()["data"]["name"] == "python"

    r2 = await client.post(f"/api/v1/{resource}", json={"name": "python"}, headers=alice["headers"])
    assert r2.status_code == 200
    assert r2.json()["data"]["id"] == r1.json()["data"]["id"]

    r = await client.get(f"/api/v1/{resource}")
    assert r.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("resource", ["categories", "tags"])
async def test_create_requires_auth(client, resource):
    r = await client.post(f"/api/v1/{resource}", json={"name": "x"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_blank_name_rejected(client, alice):
    r = await client.post("/api/v1/tags", json={"name": "   "}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["details"] == [{"field": "name", "message": "Name must not be empty"}]


@pytest.mark.asyncio
async def test_names_shared_across_posts_and_tasks(client, alice):
    """Posts and tasks referencing the same names reuse the same rows."""
    await client.post(
        "/api/v1/posts",
        json={"title": "p", "content": "c", "category": "dev", "tags": ["api", "db"]},
        headers=alice["headers"],
    )
    await client.post(
        "/api/v1/tasks",
        json={"title": "t", "category": "dev", "tags": ["db", "ops"]},
        headers=alice["headers"],
    )

    r = await client.get("/api/v1/categories")
    assert [c["name"] for c in r.json()["data"]] == ["dev"]

    r = await client.get("/api/v1/tags")
    assert [t["name"] for t in r.json()["data"]] == ["api", "db", "ops"]


@pytest.mark.asyncio
async def test_get_by_id(client, alice):
    r = await client.post("/api/v1/categories", json={"name": "news"}, headers=alice["headers"])
    category_id = r.json()["data"]["id"]

    r = await client.get(f"/api/v1/categories/{category_id}")
    assert r.json()["data"] == {"id": category_id, "name": "news"}

    r = await client.get("/api/v1/categories/999")
    assert r.status_code == 404
    assert r.json()["error"] == "Category not found"

    r = await client.get("/api/v1/tags/999")
    assert r.json()["error"] == "Tag not found"


@pytest.mark.asyncio
async def test_search_tags(client, alice):
    for name in ["python", "pytest", "rust"]:
        await client.post("/api/v1/tags", json={"name": name}, headers=alice["headers"])

    r = await client.get("/api/v1/tags", params={"search": "py"})
    assert [t["name"] for t in r.json()["data"]] == ["pytest", "python"]
