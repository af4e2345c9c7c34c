from typing import Optional
from sqlalchemy.orm import Session
from shipyard.models.system_metric import SystemMetric
from shipyard.models.timestamps import utcnow
from shipyard.schemas.system_metric import SystemMetricCreate


def get_latest(db: Session) -> Optional[SystemMetric]:
    return (
        db.query(SystemMetric)
        .order_by(SystemMetric.timestamp.desc(), SystemMetric.id.desc())
        .first()
    )


def create(db: Session, *, obj_in: SystemMetricCreate) -> SystemMetric:
    db_obj = SystemMetric(
        cpu_usage=obj_in.cpu_usage,
        memory_usage=obj_in.memory_usage,
        disk_usage=obj_in.disk_usage,
        network_usage=obj_in.network_usage,
        timestamp=utcnow(),
    )
    db.add(db_obj)
    db.flush()
    return db_obj
