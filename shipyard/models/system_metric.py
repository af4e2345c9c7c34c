from sqlalchemy import Column, Integer, DateTime
from shipyard.db.base_class import Base
from shipyard.models.timestamps import utcnow


class SystemMetric(Base):
    id = Column(Integer, primary_key=True, index=True)
    cpu_usage = Column(Integer, nullable=False)
    memory_usage = Column(Integer, nullable=False)
    disk_usage = Column(Integer, nullable=False)
    network_usage = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
