from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from shipyard.models.domain import Domain
from shipyard.models.project import Project
from shipyard.models.timestamps import utcnow
from shipyard.schemas.domain import DomainCreate, DomainUpdate


def get(db: Session, domain_id: int) -> Optional[Domain]:
    return db.get(Domain, domain_id)


def get_by_name(db: Session, name: str) -> Optional[Domain]:
    return db.query(Domain).filter(Domain.name == name).first()


def get_multi(db: Session, *, project_id: Optional[int] = None) -> List[Domain]:
    query = db.query(Domain)
    if project_id is not None:
        query = query.filter(Domain.project_id == project_id)
    return query.order_by(Domain.id).all()


def create(db: Session, *, obj_in: DomainCreate) -> Domain:
    db_obj = Domain(
        name=obj_in.name,
        project_id=obj_in.project_id,
        status="pending",
        created_at=utcnow(),
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def update(db: Session, *, db_obj: Domain, obj_in: DomainUpdate) -> Domain:
    for field, value in obj_in.changes().items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.flush()
    return db_obj


def remove(db: Session, *, db_obj: Domain) -> None:
    db.delete(db_obj)
    db.flush()


def remove_for_project(db: Session, *, project_id: int) -> int:
    return db.query(Domain).filter(Domain.project_id == project_id).delete(synchronize_session=False)


def remove_orphans(db: Session) -> int:
    """Delete rows whose project no longer exists."""
    live_ids = select(Project.id)
    return (
        db.query(Domain)
        .filter(Domain.project_id.isnot(None), Domain.project_id.notin_(live_ids))
        .delete(synchronize_session=False)
    )
