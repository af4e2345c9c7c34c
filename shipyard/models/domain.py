from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from shipyard.db.base_class import Base
from shipyard.models.timestamps import utcnow


class Domain(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("project.id"), nullable=True, index=True)
    status = Column(String, nullable=False, default="pending")  # pending, active, error
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    project = relationship("Project", back_populates="domains")
