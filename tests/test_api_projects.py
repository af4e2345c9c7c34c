"""Project endpoints: CRUD, cascade and per-project activity."""
import pytest
from httpx import AsyncClient, ASGITransport

from shipyard.main import create_app
from tests.conftest import PROJECT_PAYLOAD


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert "timestamp" in body
    assert resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    resp = await client.get("/api/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_create_project(client: AsyncClient):
    resp = await client.post("/api/projects", json=PROJECT_PAYLOAD)
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 1
    assert body["status"] == "idle"
    assert body["repositoryUrl"] == PROJECT_PAYLOAD["repositoryUrl"]
    assert body["domain"] is None
    assert body["createdAt"] == body["updatedAt"]


@pytest.mark.asyncio
async def test_create_project_accepts_snake_case(client: AsyncClient):
    payload = {
        "name": "docs",
        "framework": "Vue.js",
        "repository_url": "https://github.com/acme/docs",
        "branch": "main",
    }
    resp = await client.post("/api/projects", json=payload)
    assert resp.status_code == 201
    assert resp.json()["repositoryUrl"] == payload["repository_url"]


@pytest.mark.asyncio
async def test_create_project_validation(client: AsyncClient):
    resp = await client.post("/api/projects", json={"name": "blog"})
    assert resp.status_code == 400
    assert isinstance(resp.json()["detail"], list)

    resp = await client.post("/api/projects", json={**PROJECT_PAYLOAD, "name": ""})
    assert resp.status_code == 400

    # Nothing was stored
    assert (await client.get("/api/projects")).json() == []


@pytest.mark.asyncio
async def test_list_projects_most_recently_updated_first(client: AsyncClient):
    first = (await client.post("/api/projects", json={**PROJECT_PAYLOAD, "name": "first"})).json()
    second = (await client.post("/api/projects", json={**PROJECT_PAYLOAD, "name": "second"})).json()

    names = [p["name"] for p in (await client.get("/api/projects")).json()]
    assert names == ["second", "first"]

    await client.patch(f"/api/projects/{first['id']}", json={"status": "live"})
    names = [p["name"] for p in (await client.get("/api/projects")).json()]
    assert names == ["first", "second"]
    assert second["id"] == first["id"] + 1


@pytest.mark.asyncio
async def test_get_project(client: AsyncClient, project: dict):
    resp = await client.get(f"/api/projects/{project['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "blog"

    resp = await client.get("/api/projects/999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Project not found"


@pytest.mark.asyncio
async def test_non_integer_id_is_bad_request(client: AsyncClient):
    resp = await client.get("/api/projects/abc")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_patch_project(client: AsyncClient, project: dict):
    resp = await client.patch(
        f"/api/projects/{project['id']}",
        json={"status": "building", "domain": "blog.example.com"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "building"
    assert body["domain"] == "blog.example.com"
    assert body["name"] == "blog"
    assert body["createdAt"] == project["createdAt"]
    assert body["updatedAt"] >= project["updatedAt"]


@pytest.mark.asyncio
async def test_patch_project_rejects_bad_fields(client: AsyncClient, project: dict):
    resp = await client.patch(f"/api/projects/{project['id']}", json={"status": "exploded"})
    assert resp.status_code == 400

    resp = await client.patch(f"/api/projects/{project['id']}", json={"name": None})
    assert resp.status_code == 400

    resp = await client.patch("/api/projects/999", json={"status": "live"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_cascades(client: AsyncClient, project: dict):
    pid = project["id"]
    assert (await client.post("/api/domains", json={"name": "blog.example.com", "projectId": pid})).status_code == 201
    assert (await client.post("/api/databases", json={"name": "blog_db", "type": "PostgreSQL", "projectId": pid})).status_code == 201

    resp = await client.delete(f"/api/projects/{pid}")
    assert resp.status_code == 204
    assert resp.content == b""

    assert (await client.get(f"/api/projects/{pid}")).status_code == 404
    assert (await client.get("/api/domains", params={"projectId": pid})).json() == []
    assert (await client.get("/api/databases", params={"projectId": pid})).json() == []

    latest = (await client.get("/api/activities", params={"limit": 1})).json()[0]
    assert latest["description"] == "Project deleted - blog"
    assert latest["projectId"] is None

    assert (await client.delete(f"/api/projects/{pid}")).status_code == 404


@pytest.mark.asyncio
async def test_project_activities(client: AsyncClient, project: dict):
    pid = project["id"]
    await client.post("/api/activities", json={"type": "build", "description": "Build started", "projectId": pid})
    await client.post("/api/activities", json={"type": "build", "description": "Unrelated"})

    resp = await client.get(f"/api/projects/{pid}/activities")
    assert resp.status_code == 200
    assert [a["description"] for a in resp.json()] == ["Build started", "Project created - blog"]

    resp = await client.get(f"/api/projects/{pid}/activities", params={"limit": 1})
    assert len(resp.json()) == 1

    assert (await client.get("/api/projects/999/activities")).status_code == 404


@pytest.mark.asyncio
async def test_unexpected_error_is_logged_500(mem_storage, monkeypatch):
    def boom():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(mem_storage, "get_projects", boom)
    app = create_app(storage=mem_storage)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/api/projects")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_seeded_app():
    from shipyard.storage import MemStorage

    app = create_app(storage=MemStorage(), seed=True)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        projects = (await ac.get("/api/projects")).json()
        metrics = (await ac.get("/api/system-metrics")).json()
    assert {p["name"] for p in projects} == {"Personal Portfolio", "E-commerce Dashboard", "API Service"}
    assert metrics["cpuUsage"] == 23
