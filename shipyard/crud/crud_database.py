from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from shipyard.models.database import Database
from shipyard.models.project import Project
from shipyard.models.timestamps import utcnow
from shipyard.schemas.database import DatabaseCreate


def get(db: Session, database_id: int) -> Optional[Database]:
    return db.get(Database, database_id)


def get_by_name(db: Session, name: str) -> Optional[Database]:
    return db.query(Database).filter(Database.name == name).first()


def get_multi(
    db: Session,
    *,
    project_id: Optional[int] = None,
    type: Optional[str] = None,
) -> List[Database]:
    query = db.query(Database)
    if project_id is not None:
        query = query.filter(Database.project_id == project_id)
    if type is not None:
        query = query.filter(Database.type == type)
    return query.order_by(Database.id).all()


def create(db: Session, *, obj_in: DatabaseCreate) -> Database:
    db_obj = Database(
        name=obj_in.name,
        type=obj_in.type,
        project_id=obj_in.project_id,
        connection_string=obj_in.connection_string,
        created_at=utcnow(),
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def remove(db: Session, *, db_obj: Database) -> None:
    db.delete(db_obj)
    db.flush()


def remove_for_project(db: Session, *, project_id: int) -> int:
    return db.query(Database).filter(Database.project_id == project_id).delete(synchronize_session=False)


def remove_orphans(db: Session) -> int:
    """Delete rows whose project no longer exists."""
    live_ids = select(Project.id)
    return (
        db.query(Database)
        .filter(Database.project_id.isnot(None), Database.project_id.notin_(live_ids))
        .delete(synchronize_session=False)
    )
