import logging

from shipyard.config import Settings
from shipyard.storage.base import DEFAULT_ACTIVITY_LIMIT, Storage, StorageError
from shipyard.storage.database import DatabaseStorage
from shipyard.storage.memory import MemStorage

logger = logging.getLogger("shipyard.storage")


def build_storage(settings: Settings) -> Storage:
    """Select the storage backend once, at process start."""
    if settings.STORAGE_BACKEND == "database":
        logger.info("Using database storage")
        # Tables are owned by alembic outside development
        return DatabaseStorage.from_url(
            settings.database_url, create_tables=settings.is_development
        )
    logger.info("Using in-memory storage (data is lost on restart)")
    return MemStorage()


__all__ = [
    "DEFAULT_ACTIVITY_LIMIT",
    "DatabaseStorage",
    "MemStorage",
    "Storage",
    "StorageError",
    "build_storage",
]
