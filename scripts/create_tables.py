"""Create all database tables on the configured DATABASE_URL"""
import logging

from shipyard.config import settings
from shipyard.db.base_class import Base
from shipyard.db.session import build_engine
from shipyard.masking import mask_connection_string
# Import all models so they are registered with Base.metadata
import shipyard.models  # noqa: F401

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_tables() -> None:
    engine = build_engine(settings.database_url)
    logger.info("Creating all tables on %s", mask_connection_string(settings.database_url))
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    logger.info("All tables created successfully!")


if __name__ == "__main__":
    create_tables()
