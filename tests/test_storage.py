"""Entity store behaviour, run against both backends."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from shipyard.db.base_class import Base
from shipyard.db.session import build_session_factory
from shipyard.schemas.activity import ActivityCreate
from shipyard.schemas.database import DatabaseCreate
from shipyard.schemas.domain import DomainCreate, DomainUpdate
from shipyard.schemas.project import ProjectUpdate
from shipyard.schemas.system_metric import SystemMetricCreate
from shipyard.schemas.user import UserCreate
from shipyard.storage import DatabaseStorage, StorageError
from tests.conftest import make_project


def _database(name, project_id=None, type="PostgreSQL"):
    return DatabaseCreate(
        name=name,
        type=type,
        project_id=project_id,
        connection_string=f"postgres://u:p@localhost:5432/{name}",
    )


# --- Users ---

def test_user_create_and_lookup(storage):
    user = storage.create_user(UserCreate(username="admin", password="pw", email="a@x.io"))
    assert user.id == 1
    assert storage.get_user(user.id).username == "admin"
    assert storage.get_user_by_username("admin").id == user.id
    assert storage.get_user(99) is None
    assert storage.get_user_by_username("nobody") is None


# --- Projects ---

def test_create_project_defaults_and_activity(storage):
    project = make_project(storage, "blog")
    assert project.id == 1
    assert project.status == "idle"
    assert project.created_at == project.updated_at
    assert project.created_at.tzinfo is not None

    activities = storage.get_activities()
    assert len(activities) == 1
    assert activities[0].type == "project"
    assert activities[0].description == "Project created - blog"
    assert activities[0].project_id == project.id


def test_get_missing_returns_none(storage):
    assert storage.get_project(42) is None
    assert storage.get_domain(42) is None
    assert storage.get_database(42) is None
    assert storage.get_latest_system_metrics() is None


def test_projects_ordered_by_last_update(storage):
    first = make_project(storage, "first")
    second = make_project(storage, "second")
    assert [p.id for p in storage.get_projects()] == [second.id, first.id]

    storage.update_project(first.id, ProjectUpdate(status="building"))
    assert [p.id for p in storage.get_projects()] == [first.id, second.id]


def test_update_project_merges_given_fields(storage):
    project = make_project(storage, "blog", domain="blog.example.com")
    updated = storage.update_project(project.id, ProjectUpdate(status="live"))

    assert updated.status == "live"
    assert updated.name == "blog"
    assert updated.domain == "blog.example.com"
    assert updated.id == project.id
    assert updated.created_at == project.created_at
    assert updated.updated_at >= project.updated_at

    cleared = storage.update_project(project.id, ProjectUpdate(domain=None))
    assert cleared.domain is None
    assert cleared.status == "live"


def test_update_missing_project_returns_none(storage):
    assert storage.update_project(7, ProjectUpdate(name="x")) is None
    assert storage.get_projects() == []


def test_delete_project_cascades(storage):
    project = make_project(storage, "shop")
    other = make_project(storage, "other")
    storage.create_domain(DomainCreate(name="shop.example.com", project_id=project.id))
    storage.create_domain(DomainCreate(name="www.shop.example.com", project_id=project.id))
    kept_domain = storage.create_domain(DomainCreate(name="other.example.com", project_id=other.id))
    storage.create_database(_database("shop_db", project.id))
    kept_db = storage.create_database(_database("other_db", other.id))

    assert storage.delete_project(project.id) is True

    assert storage.get_project(project.id) is None
    assert storage.get_domains(project_id=project.id) == []
    assert storage.get_databases(project_id=project.id) == []
    assert [d.id for d in storage.get_domains()] == [kept_domain.id]
    assert [d.id for d in storage.get_databases()] == [kept_db.id]

    latest = storage.get_activities(limit=1)[0]
    assert latest.type == "project"
    assert latest.description == "Project deleted - shop"
    assert latest.project_id is None


def test_delete_project_keeps_activity_attribution(storage):
    project = make_project(storage, "shop")
    storage.create_activity(ActivityCreate(type="build", description="Build started", project_id=project.id))
    storage.delete_project(project.id)

    history = storage.get_project_activities(project.id)
    assert [a.description for a in history] == ["Build started", "Project created - shop"]


def _fail(*args, **kwargs):
    raise RuntimeError("backing store went away")


def test_failed_project_delete_changes_nothing(storage, monkeypatch):
    project = make_project(storage, "shop")
    domain = storage.create_domain(DomainCreate(name="shop.example.com", project_id=project.id))
    database = storage.create_database(_database("shop_db", project.id))
    activities_before = storage.get_activities(limit=100)

    # Fails after the dependents were selected (and, for tables, deleted)
    monkeypatch.setattr("shipyard.storage.memory.deleted_message", _fail)
    monkeypatch.setattr("shipyard.storage.database.deleted_message", _fail)
    with pytest.raises(RuntimeError):
        storage.delete_project(project.id)

    assert storage.get_project(project.id) == project
    assert storage.get_domains(project_id=project.id) == [domain]
    assert storage.get_databases(project_id=project.id) == [database]
    assert storage.get_activities(limit=100) == activities_before


def test_failed_domain_create_leaves_no_record(storage, monkeypatch):
    monkeypatch.setattr("shipyard.storage.memory.created_message", _fail)
    monkeypatch.setattr("shipyard.storage.database.created_message", _fail)
    with pytest.raises(RuntimeError):
        storage.create_domain(DomainCreate(name="lost.example.com"))

    assert storage.get_domain_by_name("lost.example.com") is None
    assert storage.get_activities() == []


def test_delete_missing_project_is_noop(storage):
    make_project(storage, "blog")
    before = storage.get_activities()
    assert storage.delete_project(99) is False
    assert storage.get_activities() == before


def test_ids_never_reused(storage):
    first = make_project(storage, "a")
    second = make_project(storage, "b")
    storage.delete_project(second.id)
    third = make_project(storage, "c")
    assert third.id == second.id + 1
    assert first.id < second.id


# --- Domains ---

def test_domain_lifecycle(storage):
    project = make_project(storage, "blog")
    domain = storage.create_domain(DomainCreate(name="blog.example.com", project_id=project.id))
    assert domain.status == "pending"
    assert storage.get_domain_by_name("blog.example.com").id == domain.id

    updated = storage.update_domain(domain.id, DomainUpdate(status="active"))
    assert updated.status == "active"
    assert updated.name == "blog.example.com"
    assert storage.update_domain(99, DomainUpdate(status="active")) is None

    assert storage.delete_domain(domain.id) is True
    assert storage.delete_domain(domain.id) is False
    assert storage.get_domain(domain.id) is None

    descriptions = [a.description for a in storage.get_project_activities(project.id)]
    assert descriptions[:2] == ["Domain deleted - blog.example.com", "Domain created - blog.example.com"]


def test_domains_filter_and_insertion_order(storage):
    a = make_project(storage, "a")
    b = make_project(storage, "b")
    d1 = storage.create_domain(DomainCreate(name="one.example.com", project_id=b.id))
    d2 = storage.create_domain(DomainCreate(name="two.example.com", project_id=a.id))
    d3 = storage.create_domain(DomainCreate(name="three.example.com"))

    assert [d.id for d in storage.get_domains()] == [d1.id, d2.id, d3.id]
    assert [d.id for d in storage.get_domains(project_id=a.id)] == [d2.id]

    # Unattached domain activity carries no project
    created = storage.get_activities(limit=1)[0]
    assert created.description == "Domain created - three.example.com"
    assert created.project_id is None


# --- Databases ---

def test_databases_filter_by_project_and_type(storage):
    project = make_project(storage, "api")
    pg = storage.create_database(_database("api_pg", project.id))
    my = storage.create_database(_database("api_my", project.id, type="MySQL"))
    loose = storage.create_database(_database("scratch"))

    assert [d.id for d in storage.get_databases()] == [pg.id, my.id, loose.id]
    assert [d.id for d in storage.get_databases(project_id=project.id, type="MySQL")] == [my.id]
    assert [d.id for d in storage.get_databases(type="PostgreSQL")] == [pg.id, loose.id]
    assert storage.get_database_by_name("scratch").id == loose.id


def test_delete_database_logs_before_removal(storage):
    project = make_project(storage, "api")
    db = storage.create_database(_database("api_db", project.id))
    assert storage.delete_database(db.id) is True
    assert storage.delete_database(db.id) is False

    latest = storage.get_activities(limit=1)[0]
    assert latest.type == "database"
    assert latest.description == "Database deleted - api_db"
    assert latest.project_id == project.id


def test_database_requires_connection_string(storage):
    with pytest.raises(StorageError):
        storage.create_database(DatabaseCreate(name="x", type="Redis"))
    assert storage.get_databases() == []


# --- Activities ---

def test_activities_newest_first_and_limited(storage):
    for i in range(15):
        storage.create_activity(ActivityCreate(type="build", description=f"Build {i}"))

    recent = storage.get_activities()
    assert len(recent) == 10
    assert recent[0].description == "Build 14"
    assert recent[-1].description == "Build 5"
    assert [a.description for a in storage.get_activities(limit=3)] == ["Build 14", "Build 13", "Build 12"]


def test_project_activities_only_that_project(storage):
    a = make_project(storage, "a")
    b = make_project(storage, "b")
    storage.create_activity(ActivityCreate(type="deployment", description="Deployed a", project_id=a.id))
    storage.create_activity(ActivityCreate(type="deployment", description="Deployed b", project_id=b.id))

    assert [x.description for x in storage.get_project_activities(a.id)] == [
        "Deployed a", "Project created - a",
    ]
    assert len(storage.get_project_activities(a.id, limit=1)) == 1


# --- System metrics ---

def test_latest_system_metrics(storage):
    storage.create_system_metrics(SystemMetricCreate(cpu_usage=10, memory_usage=20, disk_usage=30, network_usage=40))
    latest = storage.create_system_metrics(
        SystemMetricCreate(cpu_usage=50, memory_usage=60, disk_usage=70, network_usage=80)
    )
    assert storage.get_latest_system_metrics().id == latest.id
    assert storage.get_latest_system_metrics().cpu_usage == 50


# --- Maintenance ---

def test_reconcile_clean_store(storage):
    project = make_project(storage, "a")
    storage.create_domain(DomainCreate(name="a.example.com", project_id=project.id))
    assert storage.reconcile() == {"domains": 0, "databases": 0}
    assert len(storage.get_domains()) == 1


def test_reconcile_removes_orphans(mem_storage):
    project = make_project(mem_storage, "a")
    kept = mem_storage.create_domain(DomainCreate(name="a.example.com", project_id=project.id))
    mem_storage.create_domain(DomainCreate(name="ghost.example.com", project_id=999))
    mem_storage.create_database(_database("ghost_db", 999))
    mem_storage.create_database(_database("free_db"))

    assert mem_storage.reconcile() == {"domains": 1, "databases": 1}
    assert [d.id for d in mem_storage.get_domains()] == [kept.id]
    assert [d.name for d in mem_storage.get_databases()] == ["free_db"]
    assert mem_storage.reconcile() == {"domains": 0, "databases": 0}


def test_returned_records_are_copies(mem_storage):
    project = make_project(mem_storage, "blog")
    project.name = "changed"
    assert mem_storage.get_project(project.id).name == "blog"


# --- Table backend specifics ---

@pytest.fixture
def db_storage():
    store = DatabaseStorage.from_url("sqlite://", create_tables=True)
    yield store
    store.close()


def test_table_backend_rejects_duplicate_names(db_storage):
    db_storage.create_domain(DomainCreate(name="dup.example.com"))
    with pytest.raises(IntegrityError):
        db_storage.create_domain(DomainCreate(name="dup.example.com"))
    # The failed unit left nothing behind, not even its activity
    assert len(db_storage.get_domains()) == 1
    assert len(db_storage.get_activities()) == 1


def test_table_backend_rejects_dangling_project(db_storage):
    with pytest.raises(IntegrityError):
        db_storage.create_database(_database("ghost_db", 999))
    assert db_storage.get_databases() == []


def test_blog_scenario(storage):
    project = make_project(storage, "Blog", framework="Next.js")
    assert (project.id, project.status) == (1, "idle")
    domain = storage.create_domain(DomainCreate(name="blog.example.com", project_id=project.id))
    assert (domain.id, domain.status) == (1, "pending")

    storage.delete_project(project.id)

    assert storage.get_domain(1) is None
    newest = storage.get_activities()[0]
    assert newest.description == "Project deleted - Blog"
    assert newest.project_id is None


def test_get_returns_what_create_returned(storage):
    project = make_project(storage, "blog")
    assert storage.get_project(project.id) == project

    database = storage.create_database(_database("main_db"))
    assert storage.get_database(database.id) == database
    # Name lookups are what callers use to refuse a second "main_db"
    assert storage.get_database_by_name("main_db") == database


@pytest.fixture
def legacy_db_storage():
    """Table store without foreign-key enforcement, as older deployments ran."""
    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    # Import all models so Base.metadata knows every table
    import shipyard.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    store = DatabaseStorage(build_session_factory(engine), engine=engine)
    yield store
    store.close()


def test_table_reconcile_removes_orphans(legacy_db_storage):
    store = legacy_db_storage
    project = make_project(store, "a")
    kept = store.create_domain(DomainCreate(name="a.example.com", project_id=project.id))
    store.create_domain(DomainCreate(name="ghost.example.com", project_id=999))
    store.create_domain(DomainCreate(name="ghost2.example.com", project_id=998))
    store.create_database(_database("ghost_db", 999))
    store.create_database(_database("free_db"))

    assert store.reconcile() == {"domains": 2, "databases": 1}
    assert [d.id for d in store.get_domains()] == [kept.id]
    assert [d.name for d in store.get_databases()] == ["free_db"]
    assert store.reconcile() == {"domains": 0, "databases": 0}
