from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from shipyard.db.base_class import Base
from shipyard.models.timestamps import utcnow


class Database(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    type = Column(String, nullable=False)  # PostgreSQL, MySQL, Redis, ...
    project_id = Column(Integer, ForeignKey("project.id"), nullable=True, index=True)
    connection_string = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    project = relationship("Project", back_populates="databases")
