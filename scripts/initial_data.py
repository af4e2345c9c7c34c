import logging

from shipyard.config import settings
from shipyard.seed import seed_sample_data
from shipyard.storage import build_storage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_db() -> None:
    if settings.is_production:
        raise SystemExit("Refusing to load demo data (known admin password) into a production store")
    if settings.STORAGE_BACKEND != "database":
        logger.warning(
            "STORAGE_BACKEND=%s: sample data written now is lost when this script exits. "
            "Set STORAGE_BACKEND=database to load a persistent store.",
            settings.STORAGE_BACKEND,
        )
    storage = build_storage(settings)
    try:
        if seed_sample_data(storage):
            logger.info("Initial data created")
        else:
            logger.info("Store already populated, nothing to do")
    finally:
        storage.close()


def main() -> None:
    logger.info("Creating initial data")
    init_db()


if __name__ == "__main__":
    main()
