"""
Redis key-value store.

Values are stored as JSON strings under ``<key_prefix><namespace>:<key>``.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis

from workflow_fsm.core.errors import StorageError
from workflow_fsm.storage.base import KeyValueStore
from workflow_fsm.storage.redis.connection import RedisConnection


class RedisStore(KeyValueStore):
    """Persists workflow keys in Redis."""

    backend = "redis"

    def __init__(
        self,
        client: redis.Redis,
        namespace: str = "workflow",
        key_prefix: str = "fsm:",
        connection: Optional[RedisConnection] = None,
    ):
        self.client = client
        self.namespace = namespace
        self.key_prefix = key_prefix
        self._connection = connection

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            data = await self.client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Failed to read {key}: {e}", backend=self.backend) from e

        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.client.set(self._key(key), json.dumps(value, default=str))
        except redis.RedisError as e:
            raise StorageError(f"Failed to write {key}: {e}", backend=self.backend) from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Failed to delete {key}: {e}", backend=self.backend) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except redis.RedisError:
            return False

    async def close(self) -> None:
        """Close the owned connection, if this store created it."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
