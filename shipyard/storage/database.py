"""
Table-backed storage backend (SQLAlchemy).

Every public method runs as one unit of work: a session is opened, the
operation and all of its side effects (cascade deletes, activity appends) are
flushed inside a single transaction, and the transaction commits once at the
end. Any exception rolls the whole unit back, so a failed project deletion
never leaves the project's domains half removed or an activity without its
change.

Ids come from the tables' integer primary keys, so they are never reused.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shipyard.crud import (
    crud_activity,
    crud_database,
    crud_domain,
    crud_project,
    crud_system_metric,
    crud_user,
)
from shipyard.db.base_class import Base
from shipyard.db.session import build_engine, build_session_factory
from shipyard.schemas.activity import Activity, ActivityCreate
from shipyard.schemas.database import Database, DatabaseCreate
from shipyard.schemas.domain import Domain, DomainCreate, DomainUpdate
from shipyard.schemas.project import Project, ProjectCreate, ProjectUpdate
from shipyard.schemas.system_metric import SystemMetric, SystemMetricCreate
from shipyard.schemas.user import User, UserCreate
from shipyard.storage.base import (
    DEFAULT_ACTIVITY_LIMIT,
    Storage,
    StorageError,
    created_message,
    deleted_message,
)

logger = logging.getLogger("shipyard.storage")


class DatabaseStorage(Storage):
    """``Storage`` over SQLAlchemy tables."""

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None) -> None:
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, create_tables: bool = False) -> "DatabaseStorage":
        engine = build_engine(url)
        if create_tables:
            # Import all models so Base.metadata knows every table
            import shipyard.models  # noqa: F401
            Base.metadata.create_all(bind=engine)
        return cls(build_session_factory(engine), engine=engine)

    @contextmanager
    def _unit_of_work(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            with db.begin():
                yield db
        finally:
            db.close()

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    # ── Users ──

    def get_user(self, user_id: int) -> Optional[User]:
        with self._unit_of_work() as db:
            user = crud_user.get(db, user_id)
            return User.model_validate(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._unit_of_work() as db:
            user = crud_user.get_by_username(db, username)
            return User.model_validate(user) if user else None

    def create_user(self, obj_in: UserCreate) -> User:
        with self._unit_of_work() as db:
            user = User.model_validate(crud_user.create(db, obj_in=obj_in))
        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user

    # ── Projects ──

    def get_projects(self) -> List[Project]:
        with self._unit_of_work() as db:
            return [Project.model_validate(p) for p in crud_project.get_multi(db)]

    def get_project(self, project_id: int) -> Optional[Project]:
        with self._unit_of_work() as db:
            project = crud_project.get(db, project_id)
            return Project.model_validate(project) if project else None

    def create_project(self, obj_in: ProjectCreate) -> Project:
        with self._unit_of_work() as db:
            db_obj = crud_project.create(db, obj_in=obj_in)
            crud_activity.create(
                db,
                type="project",
                description=created_message("Project", db_obj.name),
                project_id=db_obj.id,
            )
            project = Project.model_validate(db_obj)
        logger.info("Project created: id=%s name=%s", project.id, project.name)
        return project

    def update_project(self, project_id: int, obj_in: ProjectUpdate) -> Optional[Project]:
        with self._unit_of_work() as db:
            db_obj = crud_project.get(db, project_id)
            if db_obj is None:
                return None
            return Project.model_validate(crud_project.update(db, db_obj=db_obj, obj_in=obj_in))

    def delete_project(self, project_id: int) -> bool:
        with self._unit_of_work() as db:
            db_obj = crud_project.get(db, project_id)
            if db_obj is None:
                return False
            name = db_obj.name
            domains_removed = crud_domain.remove_for_project(db, project_id=project_id)
            databases_removed = crud_database.remove_for_project(db, project_id=project_id)
            crud_activity.create(
                db,
                type="project",
                description=deleted_message("Project", name),
                project_id=None,
            )
            crud_project.remove(db, db_obj=db_obj)
        logger.info(
            "Project deleted: id=%s name=%s (domains=%d, databases=%d)",
            project_id, name, domains_removed, databases_removed,
        )
        return True

    # ── Domains ──

    def get_domains(self, project_id: Optional[int] = None) -> List[Domain]:
        with self._unit_of_work() as db:
            return [Domain.model_validate(d) for d in crud_domain.get_multi(db, project_id=project_id)]

    def get_domain(self, domain_id: int) -> Optional[Domain]:
        with self._unit_of_work() as db:
            domain = crud_domain.get(db, domain_id)
            return Domain.model_validate(domain) if domain else None

    def get_domain_by_name(self, name: str) -> Optional[Domain]:
        with self._unit_of_work() as db:
            domain = crud_domain.get_by_name(db, name)
            return Domain.model_validate(domain) if domain else None

    def create_domain(self, obj_in: DomainCreate) -> Domain:
        with self._unit_of_work() as db:
            db_obj = crud_domain.create(db, obj_in=obj_in)
            crud_activity.create(
                db,
                type="domain",
                description=created_message("Domain", db_obj.name),
                project_id=db_obj.project_id,
            )
            domain = Domain.model_validate(db_obj)
        logger.info("Domain created: id=%s name=%s", domain.id, domain.name)
        return domain

    def update_domain(self, domain_id: int, obj_in: DomainUpdate) -> Optional[Domain]:
        with self._unit_of_work() as db:
            db_obj = crud_domain.get(db, domain_id)
            if db_obj is None:
                return None
            return Domain.model_validate(crud_domain.update(db, db_obj=db_obj, obj_in=obj_in))

    def delete_domain(self, domain_id: int) -> bool:
        with self._unit_of_work() as db:
            db_obj = crud_domain.get(db, domain_id)
            if db_obj is None:
                return False
            name = db_obj.name
            crud_activity.create(
                db,
                type="domain",
                description=deleted_message("Domain", name),
                project_id=db_obj.project_id,
            )
            crud_domain.remove(db, db_obj=db_obj)
        logger.info("Domain deleted: id=%s name=%s", domain_id, name)
        return True

    # ── Databases ──

    def get_databases(
        self, project_id: Optional[int] = None, type: Optional[str] = None
    ) -> List[Database]:
        with self._unit_of_work() as db:
            return [
                Database.model_validate(d)
                for d in crud_database.get_multi(db, project_id=project_id, type=type)
            ]

    def get_database(self, database_id: int) -> Optional[Database]:
        with self._unit_of_work() as db:
            database = crud_database.get(db, database_id)
            return Database.model_validate(database) if database else None

    def get_database_by_name(self, name: str) -> Optional[Database]:
        with self._unit_of_work() as db:
            database = crud_database.get_by_name(db, name)
            return Database.model_validate(database) if database else None

    def create_database(self, obj_in: DatabaseCreate) -> Database:
        if not obj_in.connection_string:
            raise StorageError(f"Database '{obj_in.name}' has no connection string")
        with self._unit_of_work() as db:
            db_obj = crud_database.create(db, obj_in=obj_in)
            crud_activity.create(
                db,
                type="database",
                description=created_message("Database", db_obj.name),
                project_id=db_obj.project_id,
            )
            database = Database.model_validate(db_obj)
        logger.info("Database created: id=%s name=%s type=%s", database.id, database.name, database.type)
        return database

    def delete_database(self, database_id: int) -> bool:
        with self._unit_of_work() as db:
            db_obj = crud_database.get(db, database_id)
            if db_obj is None:
                return False
            name = db_obj.name
            crud_activity.create(
                db,
                type="database",
                description=deleted_message("Database", name),
                project_id=db_obj.project_id,
            )
            crud_database.remove(db, db_obj=db_obj)
        logger.info("Database deleted: id=%s name=%s", database_id, name)
        return True

    # ── Activities ──

    def get_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[Activity]:
        with self._unit_of_work() as db:
            return [Activity.model_validate(a) for a in crud_activity.get_multi(db, limit=limit)]

    def get_project_activities(
        self, project_id: int, limit: int = DEFAULT_ACTIVITY_LIMIT
    ) -> List[Activity]:
        with self._unit_of_work() as db:
            return [
                Activity.model_validate(a)
                for a in crud_activity.get_multi(db, project_id=project_id, limit=limit)
            ]

    def create_activity(self, obj_in: ActivityCreate) -> Activity:
        with self._unit_of_work() as db:
            return Activity.model_validate(crud_activity.create(
                db,
                type=obj_in.type,
                description=obj_in.description,
                project_id=obj_in.project_id,
            ))

    # ── System metrics ──

    def get_latest_system_metrics(self) -> Optional[SystemMetric]:
        with self._unit_of_work() as db:
            metric = crud_system_metric.get_latest(db)
            return SystemMetric.model_validate(metric) if metric else None

    def create_system_metrics(self, obj_in: SystemMetricCreate) -> SystemMetric:
        with self._unit_of_work() as db:
            return SystemMetric.model_validate(crud_system_metric.create(db, obj_in=obj_in))

    # ── Maintenance ──

    def reconcile(self) -> Dict[str, int]:
        with self._unit_of_work() as db:
            removed = {
                "domains": crud_domain.remove_orphans(db),
                "databases": crud_database.remove_orphans(db),
            }
        if removed["domains"] or removed["databases"]:
            logger.warning(
                "Reconcile removed orphans: domains=%d databases=%d",
                removed["domains"], removed["databases"],
            )
        return removed
