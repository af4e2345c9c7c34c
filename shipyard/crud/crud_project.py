from typing import List, Optional
from sqlalchemy.orm import Session
from shipyard.models.project import Project
from shipyard.models.timestamps import utcnow
from shipyard.schemas.project import ProjectCreate, ProjectUpdate


def get(db: Session, project_id: int) -> Optional[Project]:
    return db.get(Project, project_id)


def get_multi(db: Session) -> List[Project]:
    return db.query(Project).order_by(Project.updated_at.desc(), Project.id.desc()).all()


def create(db: Session, *, obj_in: ProjectCreate) -> Project:
    now = utcnow()
    db_obj = Project(
        name=obj_in.name,
        framework=obj_in.framework,
        repository_url=obj_in.repository_url,
        branch=obj_in.branch,
        domain=obj_in.domain,
        status="idle",
        created_at=now,
        updated_at=now,
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def update(db: Session, *, db_obj: Project, obj_in: ProjectUpdate) -> Project:
    for field, value in obj_in.changes().items():
        setattr(db_obj, field, value)
    db_obj.updated_at = utcnow()
    db.add(db_obj)
    db.flush()
    return db_obj


def remove(db: Session, *, db_obj: Project) -> None:
    db.delete(db_obj)
    db.flush()
