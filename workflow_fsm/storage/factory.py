"""Backend selection from settings."""

import logging
from typing import Optional

from workflow_fsm.config import Settings, StorageType, get_settings
from workflow_fsm.storage.base import KeyValueStore
from workflow_fsm.storage.memory import MemoryStore

logger = logging.getLogger(__name__)


async def create_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Create and connect the configured storage backend.

    Network backends are imported lazily so the memory backend works
    without their drivers installed.
    """
    settings = settings or get_settings()
    storage_type = settings.storage_type

    if storage_type == StorageType.MEMORY:
        store: KeyValueStore = MemoryStore()

    elif storage_type == StorageType.REDIS:
        from workflow_fsm.storage.redis import RedisConnection, RedisStore

        connection = RedisConnection(settings)
        await connection.init()
        store = RedisStore(
            connection.client,
            namespace=settings.storage.namespace,
            key_prefix=settings.storage.key_prefix,
            connection=connection,
        )

    elif storage_type == StorageType.POSTGRES:
        from workflow_fsm.storage.postgres import Database, PostgresStore

        database = Database(settings)
        await database.init()
        store = PostgresStore(database, namespace=settings.storage.namespace, owns_database=True)

    else:
        raise ValueError(f"Unsupported storage type: {storage_type}")

    logger.info(f"Using {store.backend} storage (namespace: {settings.storage.namespace})")
    return store
