from sqlalchemy import Column, Integer, String, Text, DateTime
from shipyard.db.base_class import Base
from shipyard.models.timestamps import utcnow


class Activity(Base):
    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True)  # deployment, build, database, domain, project
    description = Column(Text, nullable=False)
    # Attribution only: no foreign key, the log outlives the projects it mentions
    project_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
