"""
Storage interface shared by every backend.

The store holds six collections (users, projects, domains, databases,
activities, system metrics) and is the only place records are created,
changed or removed.

Invariants:
    - Ids are positive integers assigned per collection and never reused,
      even after deletion.
    - Missing records are reported as ``None`` (reads, updates) or ``False``
      (deletes), never as exceptions.
    - Every create/delete of a project, domain or database appends exactly one
      activity record, in the same unit of work as the change itself.
    - ``delete_project`` removes the project's domains and databases in the
      same unit of work, so no domain or database outlives its project.
    - Name uniqueness and project existence are checked by callers before
      create/update; the store itself does not reject duplicates.

Backends:
    - ``MemStorage``: in-process arenas, for tests and local demos
    - ``DatabaseStorage``: SQLAlchemy tables, for everything that must survive
      a restart
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from shipyard.schemas.activity import Activity, ActivityCreate
from shipyard.schemas.database import Database, DatabaseCreate
from shipyard.schemas.domain import Domain, DomainCreate, DomainUpdate
from shipyard.schemas.project import Project, ProjectCreate, ProjectUpdate
from shipyard.schemas.system_metric import SystemMetric, SystemMetricCreate
from shipyard.schemas.user import User, UserCreate

DEFAULT_ACTIVITY_LIMIT = 10


class StorageError(Exception):
    """Backing store failed in a way the caller cannot recover from."""
    pass


class Storage(ABC):
    """Entity store with cascade and audit-trail side effects."""

    # ── Users ──

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, obj_in: UserCreate) -> User: ...

    # ── Projects ──

    @abstractmethod
    def get_projects(self) -> List[Project]:
        """All projects, most recently updated first."""

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]: ...

    @abstractmethod
    def create_project(self, obj_in: ProjectCreate) -> Project:
        """Insert with status ``idle`` and log a ``project`` activity."""

    @abstractmethod
    def update_project(self, project_id: int, obj_in: ProjectUpdate) -> Optional[Project]:
        """Merge the fields set on ``obj_in`` and refresh ``updated_at``."""

    @abstractmethod
    def delete_project(self, project_id: int) -> bool:
        """Cascade: domains, then databases, then the activity, then the project."""

    # ── Domains ──

    @abstractmethod
    def get_domains(self, project_id: Optional[int] = None) -> List[Domain]: ...

    @abstractmethod
    def get_domain(self, domain_id: int) -> Optional[Domain]: ...

    @abstractmethod
    def get_domain_by_name(self, name: str) -> Optional[Domain]: ...

    @abstractmethod
    def create_domain(self, obj_in: DomainCreate) -> Domain: ...

    @abstractmethod
    def update_domain(self, domain_id: int, obj_in: DomainUpdate) -> Optional[Domain]: ...

    @abstractmethod
    def delete_domain(self, domain_id: int) -> bool: ...

    # ── Databases ──

    @abstractmethod
    def get_databases(
        self, project_id: Optional[int] = None, type: Optional[str] = None
    ) -> List[Database]: ...

    @abstractmethod
    def get_database(self, database_id: int) -> Optional[Database]: ...

    @abstractmethod
    def get_database_by_name(self, name: str) -> Optional[Database]: ...

    @abstractmethod
    def create_database(self, obj_in: DatabaseCreate) -> Database:
        """``obj_in.connection_string`` must already be filled in."""

    @abstractmethod
    def delete_database(self, database_id: int) -> bool: ...

    # ── Activities ──

    @abstractmethod
    def get_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[Activity]:
        """Newest first, at most ``limit`` entries."""

    @abstractmethod
    def get_project_activities(
        self, project_id: int, limit: int = DEFAULT_ACTIVITY_LIMIT
    ) -> List[Activity]: ...

    @abstractmethod
    def create_activity(self, obj_in: ActivityCreate) -> Activity: ...

    # ── System metrics ──

    @abstractmethod
    def get_latest_system_metrics(self) -> Optional[SystemMetric]: ...

    @abstractmethod
    def create_system_metrics(self, obj_in: SystemMetricCreate) -> SystemMetric: ...

    # ── Maintenance ──

    @abstractmethod
    def reconcile(self) -> Dict[str, int]:
        """Delete domains/databases pointing at missing projects.

        Idempotent. Returns the number of removed records per collection.
        """

    def close(self) -> None:
        """Release backend resources."""


# ── Activity wording, shared by backends ──

def created_message(kind: str, name: str) -> str:
    return f"{kind} created - {name}"


def deleted_message(kind: str, name: str) -> str:
    return f"{kind} deleted - {name}"
