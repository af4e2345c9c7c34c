"""Pytest configuration and fixtures shared by the store, API and CLI tests."""
import pytest
from httpx import AsyncClient, ASGITransport

from shipyard.main import create_app
from shipyard.schemas.project import ProjectCreate
from shipyard.storage import DatabaseStorage, MemStorage

# --- Payloads ---

PROJECT_PAYLOAD = {
    "name": "blog",
    "framework": "Next.js",
    "repositoryUrl": "https://github.com/acme/blog",
    "branch": "main",
}


def make_project(storage, name: str = "blog", **overrides):
    fields = {
        "name": name,
        "framework": "React",
        "repository_url": f"https://github.com/acme/{name}",
        "branch": "main",
    }
    fields.update(overrides)
    return storage.create_project(ProjectCreate(**fields))


# --- Store fixtures ---

@pytest.fixture(params=["memory", "sqlite"])
def storage(request):
    """
    Every store test runs against both backends:
      - MemStorage (arenas)
      - DatabaseStorage on a private in-memory SQLite database
    """
    if request.param == "memory":
        store = MemStorage()
    else:
        store = DatabaseStorage.from_url("sqlite://", create_tables=True)
    yield store
    store.close()


@pytest.fixture
def mem_storage():
    return MemStorage()


# --- HTTP fixtures ---

@pytest.fixture
def app(mem_storage):
    return create_app(storage=mem_storage)


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the app, no network involved."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def project(client):
    resp = await client.post("/api/projects", json=PROJECT_PAYLOAD)
    assert resp.status_code == 201
    return resp.json()
