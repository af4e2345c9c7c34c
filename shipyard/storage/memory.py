"""
In-memory storage backend.

Each collection is an arena: a dict keyed by integer id plus a counter that
only ever moves forward. Used by tests and by local runs with
``STORAGE_BACKEND=memory``.

Invariants:
    - All data is lost on process exit
    - Every public method holds the store lock for its whole duration, so a
      cascade is never observed half applied
    - Mutations build every record they will write (including the activity)
      before touching any arena, so a failure leaves the store unchanged
    - Callers get copies; mutating a returned record does not touch the store
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from shipyard.models.timestamps import utcnow
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

RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass
class Arena(Generic[RecordT]):
    """One collection: records by id plus the next id to hand out."""
    records: Dict[int, RecordT] = field(default_factory=dict)
    next_id: int = 1

    def allocate(self) -> int:
        record_id = self.next_id
        self.next_id += 1
        return record_id

    def find(self, predicate: Callable[[RecordT], bool]) -> Optional[RecordT]:
        return next((r for r in self.records.values() if predicate(r)), None)

    def select(self, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        return [r for r in self.records.values() if predicate(r)]


def _copies(records: Iterable[RecordT]) -> List[RecordT]:
    return [r.model_copy() for r in records]


def _newest_first(activities: Iterable[Activity], limit: int) -> List[Activity]:
    ordered = sorted(activities, key=lambda a: (a.created_at, a.id), reverse=True)
    return _copies(ordered[:max(limit, 0)])


class MemStorage(Storage):
    """Thread-safe in-memory implementation of ``Storage``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Arena[User] = Arena()
        self._projects: Arena[Project] = Arena()
        self._domains: Arena[Domain] = Arena()
        self._databases: Arena[Database] = Arena()
        self._activities: Arena[Activity] = Arena()
        self._system_metrics: Arena[SystemMetric] = Arena()

    # ── Users ──

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.records.get(user_id)
            return user.model_copy() if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            user = self._users.find(lambda u: u.username == username)
            return user.model_copy() if user else None

    def create_user(self, obj_in: UserCreate) -> User:
        with self._lock:
            user = User(id=self._users.allocate(), **obj_in.model_dump())
            self._users.records[user.id] = user
            logger.info("User created: id=%s username=%s", user.id, user.username)
            return user.model_copy()

    # ── Projects ──

    def get_projects(self) -> List[Project]:
        with self._lock:
            ordered = sorted(
                self._projects.records.values(),
                key=lambda p: (p.updated_at, p.id),
                reverse=True,
            )
            return _copies(ordered)

    def get_project(self, project_id: int) -> Optional[Project]:
        with self._lock:
            project = self._projects.records.get(project_id)
            return project.model_copy() if project else None

    def create_project(self, obj_in: ProjectCreate) -> Project:
        with self._lock:
            now = utcnow()
            project = Project(
                id=self._projects.allocate(),
                status="idle",
                created_at=now,
                updated_at=now,
                **obj_in.model_dump(),
            )
            activity = self._stage_log("project", created_message("Project", project.name), project.id)
            self._projects.records[project.id] = project
            self._activities.records[activity.id] = activity
            logger.info("Project created: id=%s name=%s", project.id, project.name)
            return project.model_copy()

    def update_project(self, project_id: int, obj_in: ProjectUpdate) -> Optional[Project]:
        with self._lock:
            project = self._projects.records.get(project_id)
            if project is None:
                return None
            updated = project.model_copy(update={**obj_in.changes(), "updated_at": utcnow()})
            self._projects.records[project_id] = updated
            return updated.model_copy()

    def delete_project(self, project_id: int) -> bool:
        with self._lock:
            project = self._projects.records.get(project_id)
            if project is None:
                return False

            # Stage everything that can fail before the first removal
            domain_ids = [d.id for d in self._domains.select(lambda d: d.project_id == project_id)]
            database_ids = [d.id for d in self._databases.select(lambda d: d.project_id == project_id)]
            activity = self._stage_log("project", deleted_message("Project", project.name), None)

            for domain_id in domain_ids:
                del self._domains.records[domain_id]
            for database_id in database_ids:
                del self._databases.records[database_id]
            self._activities.records[activity.id] = activity
            del self._projects.records[project_id]

            logger.info(
                "Project deleted: id=%s name=%s (domains=%d, databases=%d)",
                project_id, project.name, len(domain_ids), len(database_ids),
            )
            return True

    # ── Domains ──

    def get_domains(self, project_id: Optional[int] = None) -> List[Domain]:
        with self._lock:
            if project_id is None:
                return _copies(self._domains.records.values())
            return _copies(self._domains.select(lambda d: d.project_id == project_id))

    def get_domain(self, domain_id: int) -> Optional[Domain]:
        with self._lock:
            domain = self._domains.records.get(domain_id)
            return domain.model_copy() if domain else None

    def get_domain_by_name(self, name: str) -> Optional[Domain]:
        with self._lock:
            domain = self._domains.find(lambda d: d.name == name)
            return domain.model_copy() if domain else None

    def create_domain(self, obj_in: DomainCreate) -> Domain:
        with self._lock:
            domain = Domain(
                id=self._domains.allocate(),
                status="pending",
                created_at=utcnow(),
                **obj_in.model_dump(),
            )
            activity = self._stage_log("domain", created_message("Domain", domain.name), domain.project_id)
            self._domains.records[domain.id] = domain
            self._activities.records[activity.id] = activity
            logger.info("Domain created: id=%s name=%s", domain.id, domain.name)
            return domain.model_copy()

    def update_domain(self, domain_id: int, obj_in: DomainUpdate) -> Optional[Domain]:
        with self._lock:
            domain = self._domains.records.get(domain_id)
            if domain is None:
                return None
            updated = domain.model_copy(update=obj_in.changes())
            self._domains.records[domain_id] = updated
            return updated.model_copy()

    def delete_domain(self, domain_id: int) -> bool:
        with self._lock:
            domain = self._domains.records.get(domain_id)
            if domain is None:
                return False
            activity = self._stage_log("domain", deleted_message("Domain", domain.name), domain.project_id)
            del self._domains.records[domain_id]
            self._activities.records[activity.id] = activity
            logger.info("Domain deleted: id=%s name=%s", domain_id, domain.name)
            return True

    # ── Databases ──

    def get_databases(
        self, project_id: Optional[int] = None, type: Optional[str] = None
    ) -> List[Database]:
        with self._lock:
            return _copies(self._databases.select(
                lambda d: (project_id is None or d.project_id == project_id)
                and (type is None or d.type == type)
            ))

    def get_database(self, database_id: int) -> Optional[Database]:
        with self._lock:
            database = self._databases.records.get(database_id)
            return database.model_copy() if database else None

    def get_database_by_name(self, name: str) -> Optional[Database]:
        with self._lock:
            database = self._databases.find(lambda d: d.name == name)
            return database.model_copy() if database else None

    def create_database(self, obj_in: DatabaseCreate) -> Database:
        if not obj_in.connection_string:
            raise StorageError(f"Database '{obj_in.name}' has no connection string")
        with self._lock:
            database = Database(
                id=self._databases.allocate(),
                created_at=utcnow(),
                **obj_in.model_dump(),
            )
            activity = self._stage_log("database", created_message("Database", database.name), database.project_id)
            self._databases.records[database.id] = database
            self._activities.records[activity.id] = activity
            logger.info("Database created: id=%s name=%s type=%s", database.id, database.name, database.type)
            return database.model_copy()

    def delete_database(self, database_id: int) -> bool:
        with self._lock:
            database = self._databases.records.get(database_id)
            if database is None:
                return False
            activity = self._stage_log("database", deleted_message("Database", database.name), database.project_id)
            del self._databases.records[database_id]
            self._activities.records[activity.id] = activity
            logger.info("Database deleted: id=%s name=%s", database_id, database.name)
            return True

    # ── Activities ──

    def get_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[Activity]:
        with self._lock:
            return _newest_first(self._activities.records.values(), limit)

    def get_project_activities(
        self, project_id: int, limit: int = DEFAULT_ACTIVITY_LIMIT
    ) -> List[Activity]:
        with self._lock:
            return _newest_first(
                self._activities.select(lambda a: a.project_id == project_id), limit
            )

    def create_activity(self, obj_in: ActivityCreate) -> Activity:
        with self._lock:
            return self._append_activity(obj_in).model_copy()

    # ── System metrics ──

    def get_latest_system_metrics(self) -> Optional[SystemMetric]:
        with self._lock:
            if not self._system_metrics.records:
                return None
            latest = max(self._system_metrics.records.values(), key=lambda m: (m.timestamp, m.id))
            return latest.model_copy()

    def create_system_metrics(self, obj_in: SystemMetricCreate) -> SystemMetric:
        with self._lock:
            metric = SystemMetric(
                id=self._system_metrics.allocate(),
                timestamp=utcnow(),
                **obj_in.model_dump(),
            )
            self._system_metrics.records[metric.id] = metric
            return metric.model_copy()

    # ── Maintenance ──

    def reconcile(self) -> Dict[str, int]:
        with self._lock:
            def orphaned(record) -> bool:
                return record.project_id is not None and record.project_id not in self._projects.records

            domain_ids = [d.id for d in self._domains.select(orphaned)]
            database_ids = [d.id for d in self._databases.select(orphaned)]
            for domain_id in domain_ids:
                del self._domains.records[domain_id]
            for database_id in database_ids:
                del self._databases.records[database_id]

            if domain_ids or database_ids:
                logger.warning(
                    "Reconcile removed orphans: domains=%d databases=%d",
                    len(domain_ids), len(database_ids),
                )
            return {"domains": len(domain_ids), "databases": len(database_ids)}

    # ── Internals ──

    def _new_activity(self, obj_in: ActivityCreate) -> Activity:
        """Build an activity with its id allocated, without storing it."""
        return Activity(
            id=self._activities.allocate(),
            created_at=utcnow(),
            **obj_in.model_dump(),
        )

    def _append_activity(self, obj_in: ActivityCreate) -> Activity:
        activity = self._new_activity(obj_in)
        self._activities.records[activity.id] = activity
        return activity

    def _stage_log(self, type: str, description: str, project_id: Optional[int]) -> Activity:
        """Side-effect activity for a mutation; the caller stores it with the change."""
        return self._new_activity(
            ActivityCreate(type=type, description=description, project_id=project_id)
        )
