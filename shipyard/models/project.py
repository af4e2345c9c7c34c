from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from shipyard.db.base_class import Base
from shipyard.models.timestamps import utcnow


class Project(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    framework = Column(String, nullable=False)
    repository_url = Column(String, nullable=False)
    branch = Column(String, nullable=False)
    domain = Column(String, nullable=True)
    status = Column(String, nullable=False, default="idle")  # idle, building, live, error
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships (no ORM cascade: dependents are removed explicitly by the store)
    domains = relationship("Domain", back_populates="project", passive_deletes=True)
    databases = relationship("Database", back_populates="project", passive_deletes=True)
