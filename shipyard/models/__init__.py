from shipyard.db.base_class import Base
from shipyard.models.user import User
from shipyard.models.project import Project
from shipyard.models.domain import Domain
from shipyard.models.database import Database
from shipyard.models.activity import Activity
from shipyard.models.system_metric import SystemMetric
