from typing import List, Optional
from sqlalchemy.orm import Session
from shipyard.models.activity import Activity
from shipyard.models.timestamps import utcnow


def create(
    db: Session,
    *,
    type: str,
    description: str,
    project_id: Optional[int] = None,
) -> Activity:
    db_obj = Activity(
        type=type,
        description=description,
        project_id=project_id,
        created_at=utcnow(),
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def get_multi(
    db: Session,
    *,
    project_id: Optional[int] = None,
    limit: int = 10,
) -> List[Activity]:
    query = db.query(Activity)
    if project_id is not None:
        query = query.filter(Activity.project_id == project_id)
    return query.order_by(Activity.created_at.desc(), Activity.id.desc()).limit(max(limit, 0)).all()
