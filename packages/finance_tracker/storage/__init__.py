"""Persistence collaborators: protocols, in-memory store and SQL store."""

from __future__ import annotations

from ..config import Settings
from ..logging_setup import get_logger
from .base import Repository, Storage, UserRepository, new_id
from .memory import MemoryStorage

logger = get_logger("finance_tracker.storage")


def create_storage(settings: Settings) -> Storage:
    """Pick the store once at startup.

    With a database URL the SQL store is returned (schema managed by Alembic or
    ``init-db``); otherwise a freshly seeded in-memory store.
    """

    if settings.uses_database:
        # Deferred so the in-memory path never needs the db library configured.
        from .sql import SqlStorage

        logger.debug("Using SQL storage")
        return SqlStorage(settings.database_url)

    logger.debug("DATABASE_URL not set; using in-memory storage")
    store = MemoryStorage()
    store.initialize_default_data()
    return store


__all__ = [
    "MemoryStorage",
    "Repository",
    "Storage",
    "UserRepository",
    "create_storage",
    "new_id",
]
