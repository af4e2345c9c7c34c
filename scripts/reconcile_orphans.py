"""
Remove domains and databases that point at projects which no longer exist.

Stores written before project deletion ran as a single transaction may hold
such rows. Safe to run repeatedly.

    STORAGE_BACKEND=database python -m scripts.reconcile_orphans
"""
import logging

from shipyard.config import settings
from shipyard.storage import build_storage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def reconcile() -> dict:
    storage = build_storage(settings)
    try:
        removed = storage.reconcile()
    finally:
        storage.close()
    logger.info(
        "Orphan sweep finished: %d domain(s), %d database(s) removed",
        removed["domains"], removed["databases"],
    )
    return removed


if __name__ == "__main__":
    reconcile()
