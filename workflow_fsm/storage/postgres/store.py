"""PostgreSQL key-value store."""

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from workflow_fsm.core.errors import StorageError
from workflow_fsm.storage.base import KeyValueStore
from workflow_fsm.storage.postgres.database import Database
from workflow_fsm.storage.postgres.models import KeyValueModel


class PostgresStore(KeyValueStore):
    """Persists workflow keys in the ``workflow_kv`` table."""

    backend = "postgres"

    def __init__(self, database: Database, namespace: str = "workflow", owns_database: bool = False):
        self.database = database
        self.namespace = namespace
        self._owns_database = owns_database

    async def get(self, key: str) -> Optional[Any]:
        try:
            async with self.database.session() as session:
                row = await session.get(KeyValueModel, (self.namespace, key))
                return row.value if row is not None else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key}: {e}", backend=self.backend) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            async with self.database.session() as session:
                await session.merge(
                    KeyValueModel(namespace=self.namespace, key=key, value=value)
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key}: {e}", backend=self.backend) from e

    async def delete(self, key: str) -> None:
        try:
            async with self.database.session() as session:
                row = await session.get(KeyValueModel, (self.namespace, key))
                if row is not None:
                    await session.delete(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {key}: {e}", backend=self.backend) from e

    async def ping(self) -> bool:
        return await self.database.health_check()

    async def close(self) -> None:
        if self._owns_database:
            await self.database.close()
